"""Fixture roster loaded by ``stargate init --seed``.

John Doe has a closed and an open duty plus a status projection, Jane Doe
has a single open duty without a projection, Samantha Carter is active,
and Daniel Jackson is directory-only.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, insert, select

from stargate.infrastructure.database.schema import astronaut_details, astronaut_duties, people

if TYPE_CHECKING:
    from sqlalchemy import Connection

SEED_PEOPLE: list[dict[str, object]] = [
    {"id": 1, "name": "John Doe"},
    {"id": 2, "name": "Jane Doe"},
    {"id": 3, "name": "Samantha Carter"},
    {"id": 4, "name": "Daniel Jackson"},
]

SEED_DETAILS: list[dict[str, object]] = [
    {
        "id": 1,
        "person_id": 1,
        "current_rank": "1LT",
        "current_duty_title": "Commander",
        "career_start_date": date(2010, 1, 1),
        "career_end_date": None,
    },
    {
        "id": 2,
        "person_id": 3,
        "current_rank": "Major",
        "current_duty_title": "Science Officer",
        "career_start_date": date(2012, 5, 15),
        "career_end_date": None,
    },
]

SEED_DUTIES: list[dict[str, object]] = [
    {
        "id": 1,
        "person_id": 1,
        "rank": "1LT",
        "duty_title": "Commander",
        "duty_start_date": date(2010, 1, 1),
        "duty_end_date": date(2015, 12, 31),
    },
    {
        "id": 2,
        "person_id": 1,
        "rank": "Captain",
        "duty_title": "Mission Lead",
        "duty_start_date": date(2016, 1, 1),
        "duty_end_date": None,
    },
    {
        "id": 3,
        "person_id": 3,
        "rank": "Major",
        "duty_title": "Science Officer",
        "duty_start_date": date(2012, 5, 15),
        "duty_end_date": None,
    },
    {
        "id": 4,
        "person_id": 2,
        "rank": "Lieutenant",
        "duty_title": "Pilot",
        "duty_start_date": date(2018, 3, 10),
        "duty_end_date": None,
    },
]


def seed_roster(conn: Connection) -> bool:
    """Insert the fixture rows unless the directory already has people.

    The caller owns the transaction. Returns True if rows were inserted.
    """
    existing = conn.execute(select(func.count(people.c.id))).scalar_one()
    if existing:
        return False

    conn.execute(insert(people), SEED_PEOPLE)
    conn.execute(insert(astronaut_details), SEED_DETAILS)
    conn.execute(insert(astronaut_duties), SEED_DUTIES)
    return True
