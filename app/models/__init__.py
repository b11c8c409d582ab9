"""Entity records held by the in-memory training store."""

from .aircraft import Aircraft
from .base import Base
from .booking import Booking, BookingStatus
from .dashboard import InstructorDashboard, StudentDashboard
from .flight_log import FlightLog, FlightLogStatus, FlightType
from .message import Message, MessageContact
from .milestone import Milestone, MilestoneStatus
from .user import User, UserRole

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Aircraft",
    "Booking",
    "BookingStatus",
    "FlightLog",
    "FlightLogStatus",
    "FlightType",
    "Milestone",
    "MilestoneStatus",
    "Message",
    "MessageContact",
    "StudentDashboard",
    "InstructorDashboard",
]
