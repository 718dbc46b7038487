"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
The CLI and any future interface consume this type.

``status_code`` follows HTTP semantics (200 / 400 / 404 / 500) and is
derived from the error code unless given explicitly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_INTERNAL_ERROR = 500

_STATUS_BY_CODE: dict[str, int] = {
    "BAD_INPUT": STATUS_BAD_REQUEST,
    "DUPLICATE_START_DATE": STATUS_BAD_REQUEST,
    "BROKEN_CONTINUITY": STATUS_BAD_REQUEST,
    "DUTY_ORDER": STATUS_BAD_REQUEST,
    "NAME_TAKEN": STATUS_BAD_REQUEST,
    "PERSON_NOT_FOUND": STATUS_NOT_FOUND,
    "DUTY_NOT_FOUND": STATUS_NOT_FOUND,
    "STORAGE_ERROR": STATUS_INTERNAL_ERROR,
}


def status_for_error(code: str | None) -> int:
    """Map an error code to its status code (unknown codes are internal errors)."""
    if code is None:
        return STATUS_INTERNAL_ERROR
    return _STATUS_BY_CODE.get(code, STATUS_INTERNAL_ERROR)


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"create_duty"``).
        message: Human-readable outcome; the error message on failure.
        status_code: 200 ok, 400 bad input, 404 not found, 500 internal.
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    message: str = ""
    status_code: int = STATUS_OK
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_status(cls, values: Any) -> Any:
        """Fill ``status_code`` and ``message`` from ``error`` when omitted."""
        if not isinstance(values, dict) or values.get("ok", True):
            return values

        error = values.get("error")
        if isinstance(error, dict):
            error = ServiceError.model_validate(error)

        filled = dict(values)
        if "status_code" not in filled:
            filled["status_code"] = status_for_error(error.code if error else None)
        if not filled.get("message") and error is not None:
            filled["message"] = error.message
        return filled
