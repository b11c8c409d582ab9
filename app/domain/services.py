"""Business rules shared by the store and the controllers."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Generic, Mapping, TypeVar

from app.models.booking import BookingStatus
from app.models.flight_log import FlightLogStatus
from app.models.milestone import MilestoneStatus

logger = logging.getLogger(__name__)

StatusT = TypeVar("StatusT", bound=Enum)


class DomainError(ValueError):
    """Base class for rule violations surfaced to clients as 400s."""


class ReferenceNotFoundError(DomainError):
    """Raised when a record points at a user or aircraft that does not exist."""


class InvalidTransitionError(DomainError):
    """Raised when a status change is not allowed from the current state."""

    def __init__(self, entity: str, current: Enum, target: Enum):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move {entity} from '{current.value}' to '{target.value}'"
        )


class StatusTransitionPolicy(Generic[StatusT]):
    """Allowed-transition table for one entity's status enum.

    In permissive mode any enum member is accepted and disallowed moves are
    only reported in the log; strict mode raises ``InvalidTransitionError``.
    """

    def __init__(
        self,
        entity: str,
        allowed: Mapping[StatusT, frozenset[StatusT]],
        strict: bool = False,
    ):
        self.entity = entity
        self.allowed = allowed
        self.strict = strict

    def is_allowed(self, current: StatusT, target: StatusT) -> bool:
        if current == target:
            return True
        return target in self.allowed.get(current, frozenset())

    def check(self, current: StatusT, target: StatusT) -> None:
        if self.is_allowed(current, target):
            return
        if self.strict:
            raise InvalidTransitionError(self.entity, current, target)
        logger.warning(
            "Unusual %s status change %s -> %s accepted",
            self.entity,
            current.value,
            target.value,
        )


BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

FLIGHT_LOG_TRANSITIONS: dict[FlightLogStatus, frozenset[FlightLogStatus]] = {
    FlightLogStatus.PENDING: frozenset({FlightLogStatus.APPROVED, FlightLogStatus.REJECTED}),
    # A rejected log can be resubmitted for review
    FlightLogStatus.REJECTED: frozenset({FlightLogStatus.PENDING}),
    FlightLogStatus.APPROVED: frozenset(),
}


def booking_policy(strict: bool = False) -> StatusTransitionPolicy[BookingStatus]:
    return StatusTransitionPolicy("booking", BOOKING_TRANSITIONS, strict=strict)


def flight_log_policy(strict: bool = False) -> StatusTransitionPolicy[FlightLogStatus]:
    return StatusTransitionPolicy("flight log", FLIGHT_LOG_TRANSITIONS, strict=strict)


class BookingDomainService:
    """Domain service for booking rules"""

    @staticmethod
    def is_time_range_valid(start_time: datetime, end_time: datetime) -> bool:
        return end_time > start_time


class MilestoneDomainService:
    """Domain service for milestone progress rules"""

    @staticmethod
    def clamp_progress(progress: float) -> float:
        return max(0.0, min(100.0, float(progress)))

    @staticmethod
    def derive_status(
        current: MilestoneStatus,
        progress: float,
        requested: MilestoneStatus | None = None,
    ) -> MilestoneStatus:
        """Pick the status implied by a progress update.

        An explicit status wins; otherwise full progress completes the
        milestone and any progress marks it in progress.
        """

        if requested is not None:
            return requested
        if progress >= 100:
            return MilestoneStatus.COMPLETED
        if progress > 0:
            return MilestoneStatus.IN_PROGRESS
        return current


__all__ = [
    "DomainError",
    "ReferenceNotFoundError",
    "InvalidTransitionError",
    "StatusTransitionPolicy",
    "BOOKING_TRANSITIONS",
    "FLIGHT_LOG_TRANSITIONS",
    "booking_policy",
    "flight_log_policy",
    "BookingDomainService",
    "MilestoneDomainService",
]
