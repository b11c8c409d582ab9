"""Pydantic schemas used as views in the MVC architecture."""

from .auth import LoginRequest, RegisterRequest, UserProfile
from .bookings import BookingCreateRequest, BookingStatusUpdate
from .common import CamelModel, ErrorResponse, MessageResponse
from .flight_logs import FlightLogCreateRequest, FlightLogStatusUpdate
from .messages import MarkReadResponse, MessageCreateRequest
from .milestones import MilestoneCreateRequest, MilestoneProgressUpdate
from .users import UserSummary

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "MessageResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserProfile",
    "UserSummary",
    "BookingCreateRequest",
    "BookingStatusUpdate",
    "FlightLogCreateRequest",
    "FlightLogStatusUpdate",
    "MilestoneCreateRequest",
    "MilestoneProgressUpdate",
    "MessageCreateRequest",
    "MarkReadResponse",
]
