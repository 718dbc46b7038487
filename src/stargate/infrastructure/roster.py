"""Roster — repository pattern with transaction coordination.

The Roster is the single dependency injected into every service. It owns
the database engine. :meth:`Roster.transaction` yields a
:class:`RosterTransaction` bound to one ``engine.begin()`` connection, so
every lookup and write a command makes is part of one atomic unit:
commit on normal exit, rollback on any exception.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select, update

from stargate.domain.models import AstronautStatus, DutyRecord, Person
from stargate.infrastructure.database.engine import init_database
from stargate.infrastructure.database.schema import astronaut_details, astronaut_duties, people

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from stargate.config.settings import StargateSettings


def _duty(row: Any) -> DutyRecord:
    return DutyRecord.model_validate(dict(row))


# ---------------------------------------------------------------------------
# RosterTransaction, yielded by Roster.transaction()
# ---------------------------------------------------------------------------


@dataclass
class RosterTransaction:
    """Active transaction with the person, duty, and projection stores.

    Reads go through the same connection as writes, so a command sees its
    own pending changes.
    """

    conn: Connection

    # ------------------------------------------------------------------
    # Person directory
    # ------------------------------------------------------------------

    def find_person_by_name(self, name: str) -> Person | None:
        """Exact-match lookup by unique name."""
        row = self.conn.execute(select(people).where(people.c.name == name)).mappings().first()
        return Person.model_validate(dict(row)) if row is not None else None

    def insert_person(self, name: str) -> int:
        result = self.conn.execute(insert(people).values(name=name))
        return int(result.inserted_primary_key[0])

    def rename_person(self, person_id: int, new_name: str) -> None:
        self.conn.execute(update(people).where(people.c.id == person_id).values(name=new_name))

    # ------------------------------------------------------------------
    # Duty ledger
    # ------------------------------------------------------------------

    def find_duty(self, duty_id: int) -> DutyRecord | None:
        row = (
            self.conn.execute(select(astronaut_duties).where(astronaut_duties.c.id == duty_id))
            .mappings()
            .first()
        )
        return _duty(row) if row is not None else None

    def find_open_duty(self, person_id: int) -> DutyRecord | None:
        """Most recently started open duty, if any."""
        row = (
            self.conn.execute(
                select(astronaut_duties)
                .where(
                    astronaut_duties.c.person_id == person_id,
                    astronaut_duties.c.duty_end_date.is_(None),
                )
                .order_by(astronaut_duties.c.duty_start_date.desc())
            )
            .mappings()
            .first()
        )
        return _duty(row) if row is not None else None

    def find_open_duties(self, person_id: int) -> list[DutyRecord]:
        rows = (
            self.conn.execute(
                select(astronaut_duties)
                .where(
                    astronaut_duties.c.person_id == person_id,
                    astronaut_duties.c.duty_end_date.is_(None),
                )
                .order_by(astronaut_duties.c.duty_start_date)
            )
            .mappings()
            .all()
        )
        return [_duty(row) for row in rows]

    def count_other_open_duties(self, person_id: int, exclude_id: int) -> int:
        """Open duties for *person_id* other than *exclude_id*."""
        stmt = select(func.count(astronaut_duties.c.id)).where(
            astronaut_duties.c.person_id == person_id,
            astronaut_duties.c.id != exclude_id,
            astronaut_duties.c.duty_end_date.is_(None),
        )
        return int(self.conn.execute(stmt).scalar_one())

    def find_latest_closed_duty(self, person_id: int) -> DutyRecord | None:
        """The closed duty with the latest end date."""
        row = (
            self.conn.execute(
                select(astronaut_duties)
                .where(
                    astronaut_duties.c.person_id == person_id,
                    astronaut_duties.c.duty_end_date.is_not(None),
                )
                .order_by(astronaut_duties.c.duty_end_date.desc())
            )
            .mappings()
            .first()
        )
        return _duty(row) if row is not None else None

    def find_duty_by_person_and_date(self, person_id: int, day: date) -> DutyRecord | None:
        row = (
            self.conn.execute(
                select(astronaut_duties).where(
                    astronaut_duties.c.person_id == person_id,
                    astronaut_duties.c.duty_start_date == day,
                )
            )
            .mappings()
            .first()
        )
        return _duty(row) if row is not None else None

    def earliest_duty_start(self, person_id: int) -> date | None:
        stmt = select(func.min(astronaut_duties.c.duty_start_date)).where(
            astronaut_duties.c.person_id == person_id
        )
        return self.conn.execute(stmt).scalar_one_or_none()

    def insert_duty(
        self,
        *,
        person_id: int,
        rank: str,
        duty_title: str,
        duty_start_date: date,
        duty_end_date: date | None = None,
    ) -> int:
        result = self.conn.execute(
            insert(astronaut_duties).values(
                person_id=person_id,
                rank=rank,
                duty_title=duty_title,
                duty_start_date=duty_start_date,
                duty_end_date=duty_end_date,
            )
        )
        return int(result.inserted_primary_key[0])

    def update_duty(self, duty_id: int, **values: Any) -> None:
        if not values:
            return
        self.conn.execute(
            update(astronaut_duties).where(astronaut_duties.c.id == duty_id).values(**values)
        )

    # ------------------------------------------------------------------
    # Status projection
    # ------------------------------------------------------------------

    def find_projection(self, person_id: int) -> AstronautStatus | None:
        row = (
            self.conn.execute(
                select(astronaut_details).where(astronaut_details.c.person_id == person_id)
            )
            .mappings()
            .first()
        )
        return AstronautStatus.model_validate(dict(row)) if row is not None else None

    def insert_projection(
        self,
        *,
        person_id: int,
        current_rank: str,
        current_duty_title: str,
        career_start_date: date,
        career_end_date: date | None = None,
    ) -> int:
        result = self.conn.execute(
            insert(astronaut_details).values(
                person_id=person_id,
                current_rank=current_rank,
                current_duty_title=current_duty_title,
                career_start_date=career_start_date,
                career_end_date=career_end_date,
            )
        )
        return int(result.inserted_primary_key[0])

    def update_projection(self, person_id: int, **values: Any) -> None:
        """Update projection fields in place. ``career_start_date`` is write-once."""
        if "career_start_date" in values:
            msg = "career_start_date is set once at projection creation"
            raise ValueError(msg)
        if not values:
            return
        self.conn.execute(
            update(astronaut_details)
            .where(astronaut_details.c.person_id == person_id)
            .values(**values)
        )


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------


class Roster:
    """Repository encapsulating database access.

    Constructed once at CLI startup from :class:`StargateSettings`.
    Services receive the Roster via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: StargateSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(settings.db_path, echo=settings.database.echo)

    @property
    def root(self) -> Path:
        return self._settings.root

    @property
    def db_path(self) -> Path:
        return self._settings.db_path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for read-only access)."""
        return self._engine

    @property
    def settings(self) -> StargateSettings:
        return self._settings

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[RosterTransaction]:
        """One atomic unit of work.

        Commits when the block exits normally; any exception rolls back
        every write made through the yielded transaction and propagates.

        Usage::

            with roster.transaction() as txn:
                person = txn.find_person_by_name("Jane Doe")
                txn.insert_duty(person_id=person.id, ...)
        """
        with self._engine.begin() as conn:
            yield RosterTransaction(conn=conn)
