"""Pydantic schemas for milestone management."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.milestone import MilestoneStatus
from app.views.common import CamelModel


class MilestoneCreateRequest(CamelModel):
    """Payload for an instructor creating a milestone for a student."""

    student_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(None, max_length=1000)
    required_hours: Optional[float] = Field(None, ge=0)
    status: Optional[MilestoneStatus] = None
    completion_date: Optional[datetime] = None
    approved_by: Optional[int] = Field(None, ge=1)
    progress: Optional[float] = Field(None, ge=0, le=100)


class MilestoneProgressUpdate(CamelModel):
    progress: float = Field(..., ge=0, le=100)
    status: Optional[MilestoneStatus] = None


__all__ = ["MilestoneCreateRequest", "MilestoneProgressUpdate"]
