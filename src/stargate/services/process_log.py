"""ProcessLogService — durable command log in the ``process_log`` table.

Entries are written in their own short transaction, outside the command
they describe, so a failed command still leaves its ERROR entry behind.
A log write that fails is reported through structlog and never fails
the caller.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

import structlog
from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError

from stargate.infrastructure.database.schema import process_log
from stargate.infrastructure.repositories.query import QueryRepository
from stargate.services._helpers import now_iso
from stargate.services.base import BaseService
from stargate.services.result import ServiceResult
from stargate.services.telemetry import traced

log = structlog.get_logger(__name__)


class LogLevel(StrEnum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ProcessLogService(BaseService):
    """Writes and lists process log entries."""

    def log_info(self, message: str, **context: Any) -> None:
        self._write(LogLevel.INFO, message, **context)

    def log_success(self, message: str, **context: Any) -> None:
        self._write(LogLevel.SUCCESS, message, **context)

    def log_warning(self, message: str, **context: Any) -> None:
        self._write(LogLevel.WARNING, message, **context)

    def log_error(self, message: str, *, exception: str | None = None, **context: Any) -> None:
        self._write(LogLevel.ERROR, message, exception=exception, **context)

    def _write(
        self,
        level: LogLevel,
        message: str,
        *,
        exception: str | None = None,
        command: str | None = None,
        action: str | None = None,
        request_data: dict[str, Any] | None = None,
    ) -> None:
        row = {
            "timestamp": now_iso(),
            "level": str(level),
            "message": message,
            "exception": exception,
            "command": command,
            "action": action,
            "request_data": json.dumps(request_data, default=str) if request_data else None,
        }
        try:
            with self._roster.transaction() as txn:
                txn.conn.execute(insert(process_log).values(**row))
        except SQLAlchemyError as exc:
            log.warning("process_log.write_failed", level=str(level), error=str(exc))

    @traced
    def list_entries(self, *, level: str | None = None, limit: int = 50) -> ServiceResult:
        """Newest entries first, optionally filtered by level."""
        op = "list_process_log"
        if level is not None and level.upper() not in LogLevel.__members__:
            allowed = ", ".join(LogLevel.__members__)
            return self._fail(
                op, "BAD_INPUT", f"Unknown level {level!r}; expected one of {allowed}"
            )
        if limit < 1:
            return self._fail(op, "BAD_INPUT", "Limit must be at least 1", field="limit")

        entries = QueryRepository(self._roster.engine).list_process_log(level=level, limit=limit)
        return ServiceResult(
            ok=True,
            op=op,
            message="Successfully retrieved process log",
            data={"entries": entries, "count": len(entries)},
        )
