"""Duty kinds and day-granularity date arithmetic.

Retirement is a tagged duty kind rather than free text: every caller asks
:func:`is_retirement` instead of comparing titles itself.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import StrEnum

RETIRED_TITLE = "RETIRED"


class DutyKind(StrEnum):
    """Classification of a duty record by its title."""

    ASSIGNMENT = "assignment"
    RETIREMENT = "retirement"


def is_retirement(title: str | None) -> bool:
    """True when *title* names a retirement (case- and whitespace-insensitive)."""
    if title is None:
        return False
    return title.strip().upper() == RETIRED_TITLE


def duty_kind(title: str | None) -> DutyKind:
    """Classify a duty title."""
    return DutyKind.RETIREMENT if is_retirement(title) else DutyKind.ASSIGNMENT


def day_before(value: date) -> date:
    return value - timedelta(days=1)


def day_after(value: date) -> date:
    return value + timedelta(days=1)


def parse_duty_date(value: str | date | datetime | None) -> date | None:
    """Coerce user input to a ``date``.

    Accepts ``date``/``datetime`` objects (datetimes are truncated to the
    day) and ISO ``YYYY-MM-DD`` strings. Blank input yields None.

    Raises:
        ValueError: If a string is not a valid ISO date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        msg = f"Invalid date {value!r}; expected YYYY-MM-DD"
        raise ValueError(msg) from exc
