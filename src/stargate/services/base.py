"""BaseService — abstract foundation for all stargate services.

Every service receives a :class:`Roster` at construction time. The Roster
provides transactional access to the database. Services own their
transaction boundaries via ``self._roster.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stargate.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from stargate.domain.rules import RuleViolation
    from stargate.infrastructure.roster import Roster


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class DutyService(BaseService):
            def create_duty(self, name: str, ...) -> ServiceResult:
                with self._roster.transaction() as txn:
                    ...
    """

    def __init__(self, roster: Roster) -> None:
        self._roster = roster

    @staticmethod
    def _fail(op: str, code: str, message: str, **detail: object) -> ServiceResult:
        """Build a failed result; status code follows from *code*."""
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=dict(detail)),
        )

    @staticmethod
    def _reject(op: str, violation: RuleViolation) -> ServiceResult:
        """Convert a domain rule violation into a failed result."""
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=violation.code,
                message=violation.message,
                detail=dict(violation.detail),
            ),
        )
