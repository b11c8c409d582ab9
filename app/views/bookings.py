"""Pydantic schemas for booking requests."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from app.domain.services import BookingDomainService
from app.models.base import as_utc
from app.models.booking import BookingStatus
from app.views.common import CamelModel


class BookingCreateRequest(CamelModel):
    """Payload for a student booking request.

    ``studentId`` may be omitted by students; it defaults to the caller.
    """

    student_id: Optional[int] = Field(None, ge=1)
    instructor_id: Optional[int] = Field(None, ge=1)
    start_time: datetime
    end_time: datetime
    training_type: str = Field(..., min_length=1, max_length=80)
    aircraft_id: Optional[int] = Field(None, ge=1)
    status: Optional[BookingStatus] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def _check_time_range(self) -> "BookingCreateRequest":
        if not BookingDomainService.is_time_range_valid(
            as_utc(self.start_time), as_utc(self.end_time)
        ):
            raise ValueError("endTime must be after startTime")
        return self


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


__all__ = ["BookingCreateRequest", "BookingStatusUpdate"]
