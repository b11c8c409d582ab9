"""Booking records for scheduled training sessions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import field_validator

from app.models.base import Base, as_utc


class BookingStatus(str, Enum):
    """Lifecycle of a booking request."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(Base):
    id: int
    student_id: int
    instructor_id: Optional[int] = None
    start_time: datetime
    end_time: datetime
    training_type: str
    aircraft_id: Optional[int] = None
    status: BookingStatus = BookingStatus.PENDING
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalise_times(cls, value: datetime) -> datetime:
        return as_utc(value)


__all__ = ["Booking", "BookingStatus"]
