"""InitService — create the roster database and optionally load seed data."""

from __future__ import annotations

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from stargate.infrastructure.database.schema import astronaut_duties, people
from stargate.infrastructure.database.seed import seed_roster
from stargate.services.base import BaseService
from stargate.services.result import ServiceResult
from stargate.services.telemetry import traced

log = structlog.get_logger(__name__)


class InitService(BaseService):
    """Tables are created when the Roster opens; this reports and seeds."""

    @traced
    def init_roster(self, *, seed: bool = False) -> ServiceResult:
        op = "init_roster"
        seeded = False
        try:
            with self._roster.transaction() as txn:
                if seed:
                    seeded = seed_roster(txn.conn)
                person_count = txn.conn.execute(select(func.count(people.c.id))).scalar_one()
                duty_count = txn.conn.execute(
                    select(func.count(astronaut_duties.c.id))
                ).scalar_one()
        except SQLAlchemyError as exc:
            log.error("roster.init_failed", error=str(exc))
            return self._fail(op, "STORAGE_ERROR", f"Error initializing roster: {exc}")

        warnings: list[str] = []
        if seed and not seeded:
            warnings.append("Seed data skipped: roster already has people")

        log.info("roster.initialized", db_path=str(self._roster.db_path), seeded=seeded)
        return ServiceResult(
            ok=True,
            op=op,
            message="Roster initialized",
            data={
                "db_path": str(self._roster.db_path),
                "seeded": seeded,
                "people": int(person_count),
                "duties": int(duty_count),
            },
            warnings=warnings,
        )
