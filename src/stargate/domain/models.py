"""Record models shared by the repository and service layers.

Rows come out of SQLAlchemy Core as mappings; these frozen models give
them a stable shape before they reach the duty rules.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel

from stargate.domain.duties import DutyKind, duty_kind


class Person(BaseModel):
    """Canonical identity record. ``name`` is unique."""

    model_config = {"frozen": True}

    id: int
    name: str


class DutyRecord(BaseModel):
    """One contiguous assignment interval for a person."""

    model_config = {"frozen": True}

    id: int
    person_id: int
    rank: str
    duty_title: str
    duty_start_date: date
    duty_end_date: date | None = None

    @property
    def kind(self) -> DutyKind:
        return duty_kind(self.duty_title)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with ISO dates for ServiceResult payloads."""
        return {
            "id": self.id,
            "person_id": self.person_id,
            "rank": self.rank,
            "duty_title": self.duty_title,
            "duty_start_date": self.duty_start_date.isoformat(),
            "duty_end_date": self.duty_end_date.isoformat() if self.duty_end_date else None,
            "kind": self.kind.value,
        }


class AstronautStatus(BaseModel):
    """Denormalized current-state projection for one person."""

    model_config = {"frozen": True}

    id: int
    person_id: int
    current_rank: str
    current_duty_title: str
    career_start_date: date
    career_end_date: date | None = None
