"""Flight log records awaiting or past instructor review."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import field_validator

from app.models.base import Base, as_utc


class FlightType(str, Enum):
    DUAL = "dual"
    SOLO = "solo"
    CROSS_COUNTRY = "cross-country"


class FlightLogStatus(str, Enum):
    """Review state of a logged flight."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class FlightLog(Base):
    id: int
    student_id: int
    instructor_id: Optional[int] = None
    aircraft_id: int
    date: datetime
    duration: float
    departure_airport: str
    destination_airport: str
    return_airport: Optional[str] = None
    flight_type: FlightType
    notes: Optional[str] = None
    status: FlightLogStatus = FlightLogStatus.PENDING

    @field_validator("date")
    @classmethod
    def _normalise_date(cls, value: datetime) -> datetime:
        return as_utc(value)


__all__ = ["FlightLog", "FlightLogStatus", "FlightType"]
