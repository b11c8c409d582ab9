"""FastAPI routers acting as controllers in the MVC architecture."""

from . import aircraft, auth, bookings, dashboard, flight_logs, messages, milestones, users

__all__ = [
    "aircraft",
    "auth",
    "bookings",
    "dashboard",
    "flight_logs",
    "messages",
    "milestones",
    "users",
]
