"""QueryService — read-only person and duty projections.

Three surfaces using ``engine.connect()`` (no transaction overhead):
- get_person: person with current rank/title (projection, else open duty)
- get_duties: person summary plus the full duty ledger, newest first
- list_people: everyone with a projection or at least one duty

An unknown name is a successful, empty result: queries probe for
existence, while commands require it.
"""

from __future__ import annotations

from stargate.infrastructure.repositories.query import QueryRepository
from stargate.services._helpers import clean
from stargate.services.base import BaseService
from stargate.services.result import ServiceResult
from stargate.services.telemetry import traced


class QueryService(BaseService):
    """Handles person and duty lookups."""

    @property
    def _repo(self) -> QueryRepository:
        return QueryRepository(self._roster.engine)

    @traced
    def get_person(self, name: str) -> ServiceResult:
        op = "get_person"
        cleaned = clean(name)
        if cleaned is None:
            return self._fail(op, "BAD_INPUT", "Name cannot be empty or null", field="name")

        person = self._repo.get_person_astronaut(cleaned)
        return ServiceResult(
            ok=True,
            op=op,
            message=(
                "Successfully retrieved person"
                if person is not None
                else f"No person found with name '{cleaned}'"
            ),
            data={"person": person},
        )

    @traced
    def get_duties(self, name: str) -> ServiceResult:
        op = "get_duties"
        cleaned = clean(name)
        if cleaned is None:
            return self._fail(op, "BAD_INPUT", "Name cannot be empty or null", field="name")

        repo = self._repo
        person = repo.get_person_summary(cleaned)
        if person is None:
            return ServiceResult(
                ok=True,
                op=op,
                message=f"No person found with name '{cleaned}'",
                data={"person": None, "duties": [], "count": 0},
            )

        duties = repo.list_duties(int(person["person_id"]))
        return ServiceResult(
            ok=True,
            op=op,
            message="Successfully retrieved astronaut duties",
            data={"person": person, "duties": duties, "count": len(duties)},
        )

    @traced
    def list_people(self) -> ServiceResult:
        people = self._repo.list_people_astronaut()
        return ServiceResult(
            ok=True,
            op="list_people",
            message="Successfully retrieved people",
            data={"people": people, "count": len(people)},
        )
