"""Read-oriented repository for person and duty queries."""

from __future__ import annotations

from typing import Any

from sqlalchemy import and_, desc, func, or_, select
from sqlalchemy.engine import Engine

from stargate.infrastructure.database.schema import (
    astronaut_details,
    astronaut_duties,
    people,
    process_log,
)

# Open duties only; joined alongside the projection so either can supply
# the current rank and title.
_open_duty = astronaut_duties.alias("open_duty")


def _person_astronaut_select() -> Any:
    """Person joined to its projection, falling back to the open duty."""
    return (
        select(
            people.c.id.label("person_id"),
            people.c.name,
            func.coalesce(astronaut_details.c.current_rank, _open_duty.c.rank).label(
                "current_rank"
            ),
            func.coalesce(astronaut_details.c.current_duty_title, _open_duty.c.duty_title).label(
                "current_duty_title"
            ),
            astronaut_details.c.career_start_date,
            astronaut_details.c.career_end_date,
        )
        .select_from(people)
        .outerjoin(astronaut_details, astronaut_details.c.person_id == people.c.id)
        .outerjoin(
            _open_duty,
            and_(_open_duty.c.person_id == people.c.id, _open_duty.c.duty_end_date.is_(None)),
        )
    )


def _iso(value: Any) -> Any:
    return value.isoformat() if hasattr(value, "isoformat") else value


def _row_dict(row: Any) -> dict[str, Any]:
    return {key: _iso(value) for key, value in dict(row).items()}


class QueryRepository:
    """Encapsulates SQL for read-side query operations.

    Reads run on ``engine.connect()`` without a transaction.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_person_astronaut(self, name: str) -> dict[str, Any] | None:
        """One person-with-current-duty row for *name*, or None."""
        stmt = _person_astronaut_select().where(people.c.name == name).distinct()
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_dict(row) if row is not None else None

    def get_person_summary(self, name: str) -> dict[str, Any] | None:
        """Person joined to its projection only (no open-duty fallback)."""
        stmt = (
            select(
                people.c.id.label("person_id"),
                people.c.name,
                astronaut_details.c.current_rank,
                astronaut_details.c.current_duty_title,
                astronaut_details.c.career_start_date,
                astronaut_details.c.career_end_date,
            )
            .select_from(people)
            .outerjoin(astronaut_details, astronaut_details.c.person_id == people.c.id)
            .where(people.c.name == name)
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_dict(row) if row is not None else None

    def list_duties(self, person_id: int) -> list[dict[str, Any]]:
        """Every duty for a person, newest start date first."""
        stmt = (
            select(astronaut_duties)
            .where(astronaut_duties.c.person_id == person_id)
            .order_by(astronaut_duties.c.duty_start_date.desc())
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_dict(row) for row in rows]

    def list_people_astronaut(self) -> list[dict[str, Any]]:
        """People with a projection or any duty record, deduplicated."""
        has_duty = select(astronaut_duties.c.person_id)
        stmt = (
            _person_astronaut_select()
            .where(or_(astronaut_details.c.id.is_not(None), people.c.id.in_(has_duty)))
            .distinct()
            .order_by(people.c.id)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_dict(row) for row in rows]

    def list_process_log(
        self, *, level: str | None = None, limit: int = 50
    ) -> list[dict[str, Any]]:
        """Process log entries, newest first."""
        stmt = select(process_log)
        if level:
            stmt = stmt.where(process_log.c.level == level.upper())
        stmt = stmt.order_by(desc(process_log.c.id)).limit(limit)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]
