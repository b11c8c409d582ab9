"""Pydantic schemas for flight log submissions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.flight_log import FlightLogStatus, FlightType
from app.views.common import CamelModel


class FlightLogCreateRequest(CamelModel):
    """Payload for a student logging a flight."""

    student_id: Optional[int] = Field(None, ge=1)
    instructor_id: Optional[int] = Field(None, ge=1)
    aircraft_id: int = Field(..., ge=1)
    date: datetime
    duration: float = Field(..., gt=0, le=24, description="Hours flown")
    departure_airport: str = Field(..., min_length=1, max_length=16)
    destination_airport: str = Field(..., min_length=1, max_length=16)
    return_airport: Optional[str] = Field(None, max_length=16)
    flight_type: FlightType
    notes: Optional[str] = Field(None, max_length=1000)
    status: Optional[FlightLogStatus] = None


class FlightLogStatusUpdate(CamelModel):
    status: FlightLogStatus


__all__ = ["FlightLogCreateRequest", "FlightLogStatusUpdate"]
