"""Certification milestone records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import field_validator

from app.models.base import Base, as_utc


class MilestoneStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Milestone(Base):
    """A named training achievement tracked as a completion percentage."""

    id: int
    student_id: int
    title: str
    description: Optional[str] = None
    required_hours: Optional[float] = None
    status: MilestoneStatus = MilestoneStatus.NOT_STARTED
    completion_date: Optional[datetime] = None
    approved_by: Optional[int] = None
    progress: float = 0

    @field_validator("completion_date")
    @classmethod
    def _normalise_completion_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


__all__ = ["Milestone", "MilestoneStatus"]
