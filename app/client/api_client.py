"""Thin cached client for the training API.

Reads are served from a :class:`QueryCache` keyed by tuples such as
``("flightlogs",)`` or ``("dashboard", "student")``. Every mutation drops
the keys listed for it in :data:`INVALIDATIONS`, so the next read of a
derived view (dashboards, contact lists) goes back to the server.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import requests

logger = logging.getLogger(__name__)

QueryKey = tuple[Any, ...]

INVALIDATIONS: dict[str, tuple[QueryKey, ...]] = {
    # Booking and log writes can change an instructor's student list
    "create_booking": (("bookings",), ("dashboard",), ("instructor", "students")),
    "update_booking_status": (("bookings",), ("dashboard",)),
    "create_flight_log": (
        ("flightlogs",),
        ("dashboard", "student"),
        ("dashboard", "instructor"),
        ("instructor", "students"),
    ),
    "update_flight_log_status": (("flightlogs",), ("dashboard",), ("instructor", "students")),
    "create_milestone": (("milestones",), ("dashboard", "student")),
    "update_milestone_progress": (("milestones",), ("dashboard", "student")),
    "complete_milestone": (("milestones",), ("dashboard", "student")),
    "send_message": (("messages",),),
    "mark_messages_read": (("messages", "contacts"),),
}


class ApiError(Exception):
    """Raised for any non-2xx response."""

    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class QueryCache:
    """Store of fetched payloads with prefix invalidation."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, Any] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: QueryKey) -> Any:
        return self._entries.get(key)

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = value

    def fetch(self, key: QueryKey, loader: Callable[[], Any]) -> Any:
        if key in self._entries:
            return self._entries[key]
        value = loader()
        self._entries[key] = value
        return value

    def invalidate(self, prefix: QueryKey) -> int:
        """Drop every key starting with ``prefix``; returns how many went."""

        stale = [key for key in self._entries if key[: len(prefix)] == prefix]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()


class TrainingApiClient:
    """Client for the training API backed by a ``requests``-style session.

    Any object exposing ``request(method, url, json=...)`` and returning
    responses with ``status_code`` and ``json()`` works, which includes
    FastAPI's ``TestClient``.
    """

    def __init__(
        self,
        base_url: str = "",
        session: Optional[Any] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.cache = QueryCache()

    # ------------------------------------------------------------ transport

    def _request(self, method: str, path: str, payload: Optional[dict[str, Any]] = None) -> Any:
        kwargs: dict[str, Any] = {}
        if payload is not None:
            kwargs["json"] = payload
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        response = self.session.request(method, f"{self.base_url}{path}", **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = None

        if not 200 <= response.status_code < 300:
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiError(response.status_code, message or response.text or "Request failed")
        return body

    def _query(self, key: QueryKey, path: str) -> Any:
        return self.cache.fetch(key, lambda: self._request("GET", path))

    def _mutate(
        self,
        name: str,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> Any:
        result = self._request(method, path, payload)
        for key in INVALIDATIONS[name]:
            self.cache.invalidate(key)
        logger.debug("Mutation %s invalidated %s", name, INVALIDATIONS[name])
        return result

    # ----------------------------------------------------------------- auth

    def login(self, username: str, password: str) -> dict[str, Any]:
        self.cache.clear()
        return self._request(
            "POST", "/api/auth/login", {"username": username, "password": password}
        )

    def register(self, **fields: Any) -> dict[str, Any]:
        self.cache.clear()
        return self._request("POST", "/api/auth/register", fields)

    def logout(self) -> dict[str, Any]:
        result = self._request("POST", "/api/auth/logout")
        self.cache.clear()
        return result

    def me(self) -> dict[str, Any]:
        return self._query(("auth", "me"), "/api/auth/me")

    # ---------------------------------------------------------------- reads

    def instructors(self) -> list[dict[str, Any]]:
        return self._query(("users", "instructors"), "/api/users/instructors")

    def my_students(self) -> list[dict[str, Any]]:
        return self._query(("instructor", "students"), "/api/instructor/students")

    def aircraft(self) -> list[dict[str, Any]]:
        return self._query(("aircraft",), "/api/aircraft")

    def student_bookings(self) -> list[dict[str, Any]]:
        return self._query(("bookings", "student"), "/api/bookings/student")

    def instructor_bookings(self) -> list[dict[str, Any]]:
        return self._query(("bookings", "instructor"), "/api/bookings/instructor")

    def flight_logs(self) -> list[dict[str, Any]]:
        return self._query(("flightlogs",), "/api/flightlogs")

    def pending_flight_logs(self) -> list[dict[str, Any]]:
        return self._query(("flightlogs", "instructor"), "/api/flightlogs/instructor")

    def milestones(self) -> list[dict[str, Any]]:
        return self._query(("milestones",), "/api/milestones")

    def student_milestones(self, student_id: int) -> list[dict[str, Any]]:
        return self._query(
            ("milestones", "student", student_id),
            f"/api/milestones/student/{student_id}",
        )

    def student_dashboard(self) -> dict[str, Any]:
        return self._query(("dashboard", "student"), "/api/dashboard/student")

    def instructor_dashboard(self) -> dict[str, Any]:
        return self._query(("dashboard", "instructor"), "/api/dashboard/instructor")

    def contacts(self) -> list[dict[str, Any]]:
        return self._query(("messages", "contacts"), "/api/messages/contacts")

    def conversation(self, contact_id: int) -> list[dict[str, Any]]:
        key = ("messages", contact_id)
        if key in self.cache:
            return self.cache.get(key)

        # Opening a conversation marks it read server-side
        messages = self._request("GET", f"/api/messages/{contact_id}")
        self.cache.set(key, messages)
        self.cache.invalidate(("messages", "contacts"))
        return messages

    # ------------------------------------------------------------ mutations

    def create_booking(self, **fields: Any) -> dict[str, Any]:
        return self._mutate("create_booking", "POST", "/api/bookings", fields)

    def update_booking_status(self, booking_id: int, status: str) -> dict[str, Any]:
        return self._mutate(
            "update_booking_status",
            "PATCH",
            f"/api/bookings/{booking_id}/status",
            {"status": status},
        )

    def create_flight_log(self, **fields: Any) -> dict[str, Any]:
        return self._mutate("create_flight_log", "POST", "/api/flightlogs", fields)

    def update_flight_log_status(self, log_id: int, status: str) -> dict[str, Any]:
        return self._mutate(
            "update_flight_log_status",
            "PATCH",
            f"/api/flightlogs/{log_id}/status",
            {"status": status},
        )

    def create_milestone(self, **fields: Any) -> dict[str, Any]:
        return self._mutate("create_milestone", "POST", "/api/milestones", fields)

    def update_milestone_progress(
        self,
        milestone_id: int,
        progress: float,
        status: Optional[str] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"progress": progress}
        if status is not None:
            payload["status"] = status
        return self._mutate(
            "update_milestone_progress",
            "PATCH",
            f"/api/milestones/{milestone_id}/progress",
            payload,
        )

    def complete_milestone(self, milestone_id: int) -> dict[str, Any]:
        return self._mutate(
            "complete_milestone",
            "PATCH",
            f"/api/milestones/{milestone_id}/complete",
        )

    def send_message(self, receiver_id: int, content: str) -> dict[str, Any]:
        return self._mutate(
            "send_message",
            "POST",
            "/api/messages",
            {"receiverId": receiver_id, "content": content},
        )

    def mark_messages_read(self, sender_id: int) -> dict[str, Any]:
        return self._mutate("mark_messages_read", "PATCH", f"/api/messages/read/{sender_id}")


__all__ = ["ApiError", "INVALIDATIONS", "QueryCache", "TrainingApiClient"]
