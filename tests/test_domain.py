"""Status transition tables and milestone progress rules."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.domain.services import (
    BookingDomainService,
    InvalidTransitionError,
    MilestoneDomainService,
    booking_policy,
    flight_log_policy,
)
from app.models import BookingStatus, FlightLogStatus, MilestoneStatus


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED, True),
        (BookingStatus.PENDING, BookingStatus.CANCELLED, True),
        (BookingStatus.CONFIRMED, BookingStatus.COMPLETED, True),
        (BookingStatus.PENDING, BookingStatus.COMPLETED, False),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED, False),
        (BookingStatus.COMPLETED, BookingStatus.COMPLETED, True),
    ],
)
def test_booking_transitions(current, target, allowed):
    assert booking_policy().is_allowed(current, target) is allowed


def test_rejected_log_can_be_resubmitted():
    policy = flight_log_policy()

    assert policy.is_allowed(FlightLogStatus.REJECTED, FlightLogStatus.PENDING)
    assert not policy.is_allowed(FlightLogStatus.APPROVED, FlightLogStatus.REJECTED)


def test_strict_policy_raises():
    policy = flight_log_policy(strict=True)

    with pytest.raises(InvalidTransitionError) as excinfo:
        policy.check(FlightLogStatus.APPROVED, FlightLogStatus.PENDING)

    assert "approved" in str(excinfo.value)
    assert excinfo.value.target == FlightLogStatus.PENDING


def test_permissive_policy_only_warns(caplog):
    booking_policy().check(BookingStatus.CANCELLED, BookingStatus.CONFIRMED)

    assert "cancelled -> confirmed" in caplog.text


def test_time_range_requires_end_after_start():
    start = datetime(2024, 1, 1, 9, tzinfo=timezone.utc)
    assert BookingDomainService.is_time_range_valid(start, start.replace(hour=10))
    assert not BookingDomainService.is_time_range_valid(start, start)


@pytest.mark.parametrize(
    ("progress", "requested", "expected"),
    [
        (100, None, MilestoneStatus.COMPLETED),
        (35, None, MilestoneStatus.IN_PROGRESS),
        (0, None, MilestoneStatus.NOT_STARTED),
        (100, MilestoneStatus.IN_PROGRESS, MilestoneStatus.IN_PROGRESS),
    ],
)
def test_derive_status(progress, requested, expected):
    derived = MilestoneDomainService.derive_status(MilestoneStatus.NOT_STARTED, progress, requested)

    assert derived == expected


def test_clamp_progress():
    assert MilestoneDomainService.clamp_progress(-5) == 0
    assert MilestoneDomainService.clamp_progress(250) == 100
    assert MilestoneDomainService.clamp_progress(42.5) == 42.5
