"""SQLAlchemy Core table definitions for the stargate database.

``astronaut_details`` is the per-person status projection; it is derived
from ``astronaut_duties`` and written in the same transaction.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

people = Table(
    "people",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False, unique=True),
)

astronaut_details = Table(
    "astronaut_details",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("person_id", Integer, ForeignKey("people.id"), nullable=False, unique=True),
    Column("current_rank", Text, nullable=False),
    Column("current_duty_title", Text, nullable=False),
    Column("career_start_date", Date, nullable=False),
    Column("career_end_date", Date),
)

astronaut_duties = Table(
    "astronaut_duties",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("person_id", Integer, ForeignKey("people.id"), nullable=False),
    Column("rank", Text, nullable=False),
    Column("duty_title", Text, nullable=False),
    Column("duty_start_date", Date, nullable=False),
    Column("duty_end_date", Date),  # NULL = open duty
    UniqueConstraint("person_id", "duty_start_date"),
)

process_log = Table(
    "process_log",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("timestamp", Text, nullable=False),
    Column("level", Text, nullable=False),  # INFO | SUCCESS | WARNING | ERROR
    Column("message", Text, nullable=False),
    Column("exception", Text),
    Column("command", Text),
    Column("action", Text),
    Column("request_data", Text),  # JSON object
)

# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

Index("ix_duties_person", astronaut_duties.c.person_id)
# At most one open duty per person; concurrent creates conflict here.
Index(
    "uq_duties_one_open",
    astronaut_duties.c.person_id,
    unique=True,
    sqlite_where=astronaut_duties.c.duty_end_date.is_(None),
)
Index("ix_process_log_timestamp", process_log.c.timestamp)
Index("ix_process_log_level", process_log.c.level)
