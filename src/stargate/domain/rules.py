"""Admission rules for new duty records.

Each check is a pure function over records already fetched by the caller
and returns a :class:`RuleViolation` or None. The service layer runs them
in order and stops at the first violation; nothing here touches storage.

Check order:
1. Required fields (before any lookup)
2. Person exists
3. No duplicate start date for the person
4. Continuity after the latest closed duty (assignments only)
5. Open-duty ordering (assignments only, opt-in)

:func:`check_retirement_slot` guards the RETIRED duty an amendment
generates; it shares the duplicate-start error code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from stargate.domain.duties import day_after, day_before, is_retirement
from stargate.domain.models import DutyRecord, Person


@dataclass(frozen=True)
class RuleViolation:
    """A rejected admission: error code, human message, and context."""

    code: str
    message: str
    detail: dict[str, Any] = field(default_factory=dict)


def check_required_fields(
    name: str | None,
    rank: str | None,
    duty_title: str | None,
    duty_start_date: date | None,
) -> RuleViolation | None:
    """Reject blank name, rank, title, or a missing start date."""
    if not name or not name.strip():
        return RuleViolation(code="BAD_INPUT", message="Name is required", detail={"field": "name"})
    if not rank or not rank.strip():
        return RuleViolation(code="BAD_INPUT", message="Rank is required", detail={"field": "rank"})
    if not duty_title or not duty_title.strip():
        return RuleViolation(
            code="BAD_INPUT", message="Duty Title is required", detail={"field": "duty_title"}
        )
    if duty_start_date is None:
        return RuleViolation(
            code="BAD_INPUT",
            message="Duty Start Date is required",
            detail={"field": "duty_start_date"},
        )
    return None


def check_person_exists(name: str, person: Person | None) -> RuleViolation | None:
    if person is None:
        return RuleViolation(
            code="PERSON_NOT_FOUND",
            message=f"Person with name '{name}' not found",
            detail={"name": name},
        )
    return None


def check_duplicate_start(
    name: str,
    duty_start_date: date,
    same_day_duty: DutyRecord | None,
) -> RuleViolation | None:
    """Only one duty per person may start on a given day."""
    if same_day_duty is None:
        return None
    day = duty_start_date.isoformat()
    return RuleViolation(
        code="DUPLICATE_START_DATE",
        message=(
            f"Person '{name}' already has an astronaut duty starting on {day}. "
            "Only one duty per start date is allowed."
        ),
        detail={"existing_duty_id": same_day_duty.id, "duty_start_date": day},
    )


def expected_start_date(last_closed: DutyRecord) -> date:
    """The only start date that continues the ledger after *last_closed*."""
    assert last_closed.duty_end_date is not None
    return day_after(last_closed.duty_end_date)


def check_continuity(
    duty_title: str,
    duty_start_date: date,
    last_closed: DutyRecord | None,
) -> RuleViolation | None:
    """A new assignment must start the day after the latest closed duty ended.

    Retirement may start on any date and is exempt.
    """
    if is_retirement(duty_title) or last_closed is None or last_closed.duty_end_date is None:
        return None

    expected = expected_start_date(last_closed)
    if duty_start_date == expected:
        return None

    return RuleViolation(
        code="BROKEN_CONTINUITY",
        message=(
            f"New duty start date should be {expected.isoformat()} "
            f"(one day after the previous duty end date "
            f"{last_closed.duty_end_date.isoformat()}). "
            f"Current start date: {duty_start_date.isoformat()}"
        ),
        detail={
            "expected_start_date": expected.isoformat(),
            "previous_duty_id": last_closed.id,
        },
    )


def check_open_duty(
    duty_title: str,
    duty_start_date: date,
    open_duty: DutyRecord | None,
    *,
    require_start_after_open: bool = False,
) -> RuleViolation | None:
    """Rule for a person whose current duty is still open.

    The open duty is closed on ``duty_start_date - 1 day``, so continuity is
    satisfied by construction. With *require_start_after_open* the new duty
    must also start strictly after the open duty started, which keeps the
    closed interval non-empty.
    """
    if not require_start_after_open or open_duty is None or is_retirement(duty_title):
        return None
    if duty_start_date > open_duty.duty_start_date:
        return None

    return RuleViolation(
        code="DUTY_ORDER",
        message=(
            f"New duty start date {duty_start_date.isoformat()} must be after the "
            f"current duty start date {open_duty.duty_start_date.isoformat()}; "
            f"the current duty would close on {day_before(duty_start_date).isoformat()}."
        ),
        detail={
            "open_duty_id": open_duty.id,
            "open_duty_start_date": open_duty.duty_start_date.isoformat(),
        },
    )


def check_retirement_slot(
    retire_on: date,
    same_day_duty: DutyRecord | None,
) -> RuleViolation | None:
    """An automatic retirement needs its start day free in the ledger."""
    if same_day_duty is None:
        return None
    day = retire_on.isoformat()
    return RuleViolation(
        code="DUPLICATE_START_DATE",
        message=(
            f"Cannot record retirement starting {day}: astronaut duty "
            f"{same_day_duty.id} ({same_day_duty.duty_title}) already starts on that day. "
            "Only one duty per start date is allowed."
        ),
        detail={"existing_duty_id": same_day_duty.id, "duty_start_date": day},
    )
