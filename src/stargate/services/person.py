"""PersonService — person directory commands (create, rename).

Names are the lookup key everywhere else, so both commands guard
uniqueness before writing; the UNIQUE constraint on ``people.name``
backs that up under concurrency.
"""

from __future__ import annotations

import structlog
from sqlalchemy.exc import SQLAlchemyError

from stargate.services._helpers import clean
from stargate.services.base import BaseService
from stargate.services.result import ServiceResult
from stargate.services.telemetry import traced

log = structlog.get_logger(__name__)


class PersonService(BaseService):
    """Creates and renames people."""

    @traced
    def create_person(self, name: str) -> ServiceResult:
        op = "create_person"
        cleaned = clean(name)
        if cleaned is None:
            return self._fail(op, "BAD_INPUT", "Name is required", field="name")

        try:
            with self._roster.transaction() as txn:
                if txn.find_person_by_name(cleaned) is not None:
                    return self._fail(
                        op, "NAME_TAKEN", f"Person with name '{cleaned}' already exists"
                    )
                person_id = txn.insert_person(cleaned)
        except SQLAlchemyError as exc:
            log.error("person.create_failed", name=cleaned, error=str(exc))
            return self._fail(op, "STORAGE_ERROR", f"Error creating person: {exc}")

        log.info("person.created", person_id=person_id, name=cleaned)
        return ServiceResult(
            ok=True,
            op=op,
            message="Person created successfully",
            data={"id": person_id, "name": cleaned},
        )

    @traced
    def rename_person(self, current_name: str, new_name: str) -> ServiceResult:
        """Re-key a person under *new_name*; the id is unchanged."""
        op = "rename_person"
        current = clean(current_name)
        new = clean(new_name)
        if current is None:
            return self._fail(op, "BAD_INPUT", "Current name is required", field="current_name")
        if new is None:
            return self._fail(op, "BAD_INPUT", "New name is required", field="new_name")

        try:
            with self._roster.transaction() as txn:
                person = txn.find_person_by_name(current)
                if person is None:
                    return self._fail(
                        op,
                        "PERSON_NOT_FOUND",
                        f"Person with name '{current}' not found",
                        name=current,
                    )
                if new != current and txn.find_person_by_name(new) is not None:
                    return self._fail(op, "NAME_TAKEN", f"Person with name '{new}' already exists")
                txn.rename_person(person.id, new)
        except SQLAlchemyError as exc:
            log.error("person.rename_failed", name=current, error=str(exc))
            return self._fail(op, "STORAGE_ERROR", f"Error updating person: {exc}")

        log.info("person.renamed", person_id=person.id, old_name=current, new_name=new)
        return ServiceResult(
            ok=True,
            op=op,
            message="Person updated successfully",
            data={"id": person.id, "name": new, "previous_name": current},
        )
