"""SQLite database engine, schema, and seed data via SQLAlchemy Core."""

from stargate.infrastructure.database.engine import create_db_engine, init_database
from stargate.infrastructure.database.schema import (
    astronaut_details,
    astronaut_duties,
    metadata,
    people,
    process_log,
)
from stargate.infrastructure.database.seed import seed_roster

__all__ = [
    "astronaut_details",
    "astronaut_duties",
    "create_db_engine",
    "init_database",
    "metadata",
    "people",
    "process_log",
    "seed_roster",
]
