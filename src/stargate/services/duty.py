"""DutyService — duty lifecycle commands (create, amend).

Create pipeline: VALIDATE → PROJECT → CLOSE → INSERT → RESPOND
Amend pipeline:  LOOKUP → CHECK → APPLY → AUTO-RETIRE → RESPOND

Validation lookups and writes share one roster transaction, so a command
either applies every change to the ledger and the status projection or
none of them.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError

from stargate.domain.duties import (
    RETIRED_TITLE,
    day_after,
    day_before,
    duty_kind,
    is_retirement,
    parse_duty_date,
)
from stargate.domain.models import DutyRecord
from stargate.domain.rules import (
    check_continuity,
    check_duplicate_start,
    check_open_duty,
    check_person_exists,
    check_required_fields,
    check_retirement_slot,
)
from stargate.infrastructure.roster import RosterTransaction
from stargate.services._helpers import clean
from stargate.services.base import BaseService
from stargate.services.result import ServiceResult
from stargate.services.telemetry import trace_span, traced

log = structlog.get_logger(__name__)

DateInput = str | date | datetime | None


class DutyService(BaseService):
    """Creates and amends astronaut duty records."""

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    @traced
    def create_duty(
        self,
        name: str,
        rank: str,
        duty_title: str,
        duty_start_date: DateInput,
    ) -> ServiceResult:
        """Admit a new duty for *name* and make it the person's current duty.

        A RETIRED duty closes every open duty and ends the career; any other
        duty closes only the most recently started open duty.
        """
        op = "create_duty"
        name_c, rank_c, title_c = clean(name), clean(rank), clean(duty_title)

        try:
            start = parse_duty_date(duty_start_date)
        except ValueError as exc:
            return self._fail(op, "BAD_INPUT", str(exc), field="duty_start_date")

        violation = check_required_fields(name_c, rank_c, title_c, start)
        if violation is not None:
            return self._reject(op, violation)
        assert name_c is not None and rank_c is not None and title_c is not None
        assert start is not None

        retiring = is_retirement(title_c)
        if retiring:
            title_c = RETIRED_TITLE
        require_after_open = self._roster.settings.rules.require_start_after_open_duty

        try:
            with self._roster.transaction() as txn:
                # ── VALIDATE ─────────────────────────────────────────
                with trace_span("validate"):
                    person = txn.find_person_by_name(name_c)
                    violation = check_person_exists(name_c, person)
                    if violation is None:
                        assert person is not None
                        violation = (
                            check_duplicate_start(
                                name_c, start, txn.find_duty_by_person_and_date(person.id, start)
                            )
                            or check_continuity(
                                title_c, start, txn.find_latest_closed_duty(person.id)
                            )
                            or check_open_duty(
                                title_c,
                                start,
                                txn.find_open_duty(person.id),
                                require_start_after_open=require_after_open,
                            )
                        )
                    if violation is not None:
                        log.info("duty.rejected", name=name_c, code=violation.code)
                        return self._reject(op, violation)
                    assert person is not None

                # ── PROJECT ──────────────────────────────────────────
                with trace_span("project"):
                    projection_created = self._project_new_duty(
                        txn, person.id, rank_c, title_c, start, retiring=retiring
                    )

                # ── CLOSE ────────────────────────────────────────────
                with trace_span("close"):
                    end = day_before(start)
                    if retiring:
                        to_close = txn.find_open_duties(person.id)
                    else:
                        current = txn.find_open_duty(person.id)
                        to_close = [current] if current is not None else []
                    for duty in to_close:
                        txn.update_duty(duty.id, duty_end_date=end)
                        log.debug("duty.closed", duty_id=duty.id, duty_end_date=end.isoformat())

                # ── INSERT ───────────────────────────────────────────
                with trace_span("insert"):
                    duty_id = txn.insert_duty(
                        person_id=person.id,
                        rank=rank_c,
                        duty_title=title_c,
                        duty_start_date=start,
                    )
        except SQLAlchemyError as exc:
            log.error("duty.create_failed", name=name_c, error=str(exc))
            return self._fail(op, "STORAGE_ERROR", f"Error creating astronaut duty: {exc}")

        log.info(
            "duty.created",
            duty_id=duty_id,
            person_id=person.id,
            duty_title=title_c,
            retirement=retiring,
        )

        # ── RESPOND ──────────────────────────────────────────────
        return ServiceResult(
            ok=True,
            op=op,
            message="Astronaut duty created successfully",
            data={
                "id": duty_id,
                "person_id": person.id,
                "name": name_c,
                "rank": rank_c,
                "duty_title": title_c,
                "duty_start_date": start.isoformat(),
                "kind": duty_kind(title_c).value,
                "retirement": retiring,
                "closed_duty_ids": [duty.id for duty in to_close],
                "projection_created": projection_created,
            },
        )

    @staticmethod
    def _project_new_duty(
        txn: RosterTransaction,
        person_id: int,
        rank: str,
        duty_title: str,
        start: date,
        *,
        retiring: bool,
    ) -> bool:
        """Upsert the status projection for a new duty. Returns True if created.

        ``career_start_date`` is only written when the projection is created.
        """
        career_end = day_before(start) if retiring else None
        projection = txn.find_projection(person_id)
        if projection is None:
            txn.insert_projection(
                person_id=person_id,
                current_rank=rank,
                current_duty_title=duty_title,
                career_start_date=_career_start(txn, person_id, start),
                career_end_date=career_end,
            )
            return True

        changes: dict[str, Any] = {"current_rank": rank, "current_duty_title": duty_title}
        if retiring:
            changes["career_end_date"] = career_end
        txn.update_projection(person_id, **changes)
        return False

    # ------------------------------------------------------------------
    # amend
    # ------------------------------------------------------------------

    @traced
    def amend_duty(
        self,
        duty_id: int,
        *,
        duty_title: str | None = None,
        rank: str | None = None,
        duty_start_date: DateInput = None,
        duty_end_date: DateInput = None,
    ) -> ServiceResult:
        """Edit a duty in place without re-running the admission rules.

        Setting an end date that leaves the person with no other open duty
        records a RETIRED duty starting the next day and ends the career.
        """
        op = "amend_duty"
        warnings: list[str] = []
        title_c, rank_c = clean(duty_title), clean(rank)

        try:
            start = parse_duty_date(duty_start_date)
            end = parse_duty_date(duty_end_date)
        except ValueError as exc:
            return self._fail(op, "BAD_INPUT", str(exc))

        changes: dict[str, Any] = {}
        if title_c is not None:
            changes["duty_title"] = title_c
        if rank_c is not None:
            changes["rank"] = rank_c
        if start is not None:
            changes["duty_start_date"] = start
        if end is not None:
            changes["duty_end_date"] = end
        if not changes:
            return self._fail(op, "BAD_INPUT", "No changes specified")

        retirement_id: int | None = None
        try:
            with self._roster.transaction() as txn:
                # ── LOOKUP ───────────────────────────────────────────
                existing = txn.find_duty(duty_id)
                if existing is None:
                    return self._fail(
                        op, "DUTY_NOT_FOUND", "Astronaut duty not found", duty_id=duty_id
                    )

                # ── CHECK ────────────────────────────────────────────
                amended = existing.model_copy(update=changes)
                retiring = (
                    end is not None
                    and txn.count_other_open_duties(amended.person_id, duty_id) == 0
                )
                if retiring:
                    assert end is not None
                    violation = check_retirement_slot(
                        day_after(end), _retirement_clash(txn, amended, day_after(end))
                    )
                    if violation is not None:
                        log.info("duty.amend_rejected", duty_id=duty_id, code=violation.code)
                        return self._reject(op, violation)

                # ── APPLY ────────────────────────────────────────────
                with trace_span("apply"):
                    txn.update_duty(duty_id, **changes)
                    if amended.duty_end_date and amended.duty_end_date < amended.duty_start_date:
                        warnings.append(
                            f"Duty end date {amended.duty_end_date.isoformat()} precedes its "
                            f"start date {amended.duty_start_date.isoformat()}"
                        )

                # ── AUTO-RETIRE ──────────────────────────────────────
                if retiring:
                    assert end is not None
                    with trace_span("auto_retire"):
                        retirement_id = self._auto_retire(txn, amended.person_id, amended.rank, end)
        except SQLAlchemyError as exc:
            log.error("duty.amend_failed", duty_id=duty_id, error=str(exc))
            return self._fail(op, "STORAGE_ERROR", f"Error updating astronaut duty: {exc}")

        retirement_created = retirement_id is not None
        log.info(
            "duty.amended",
            duty_id=duty_id,
            fields_changed=sorted(changes),
            retirement_created=retirement_created,
        )

        # ── RESPOND ──────────────────────────────────────────────
        return ServiceResult(
            ok=True,
            op=op,
            message=(
                "Astronaut duty updated and retirement duty created successfully"
                if retirement_created
                else "Astronaut duty updated successfully"
            ),
            data={
                "duty": amended.to_dict(),
                "fields_changed": sorted(changes),
                "retirement_created": retirement_created,
                "retirement_duty_id": retirement_id,
            },
            warnings=warnings,
        )

    @staticmethod
    def _auto_retire(txn: RosterTransaction, person_id: int, rank: str, end: date) -> int:
        """Record a RETIRED duty the day after *end* and end the career on *end*."""
        retire_on = day_after(end)
        retirement_id = txn.insert_duty(
            person_id=person_id,
            rank=rank,
            duty_title=RETIRED_TITLE,
            duty_start_date=retire_on,
        )

        projection_changes = {
            "current_rank": rank,
            "current_duty_title": RETIRED_TITLE,
            "career_end_date": end,
        }
        if txn.find_projection(person_id) is None:
            txn.insert_projection(
                person_id=person_id,
                career_start_date=_career_start(txn, person_id, retire_on),
                **projection_changes,
            )
        else:
            txn.update_projection(person_id, **projection_changes)

        log.info("duty.retirement_created", duty_id=retirement_id, person_id=person_id)
        return retirement_id


def _career_start(txn: RosterTransaction, person_id: int, start: date) -> date:
    """Earliest start in the person's ledger, counting *start*."""
    earliest = txn.earliest_duty_start(person_id)
    return start if earliest is None else min(earliest, start)


def _retirement_clash(
    txn: RosterTransaction, amended: DutyRecord, retire_on: date
) -> DutyRecord | None:
    """The duty that would start on *retire_on* once *amended* is written."""
    if amended.duty_start_date == retire_on:
        return amended
    clash = txn.find_duty_by_person_and_date(amended.person_id, retire_on)
    if clash is not None and clash.id == amended.id:
        return None
    return clash
