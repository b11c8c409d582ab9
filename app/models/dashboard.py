"""Derived dashboard aggregates."""

from __future__ import annotations

from app.models.base import Base
from app.models.booking import Booking
from app.models.flight_log import FlightLog
from app.models.milestone import Milestone


class StudentDashboard(Base):
    total_hours: float
    solo_hours: float
    cross_country_hours: float
    upcoming_bookings: list[Booking]
    milestones: list[Milestone]
    recent_logs: list[FlightLog]


class InstructorDashboard(Base):
    total_students: int
    pending_bookings: list[Booking]
    today_bookings: list[Booking]
    pending_logs: list[FlightLog]


__all__ = ["StudentDashboard", "InstructorDashboard"]
