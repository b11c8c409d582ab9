"""Demo roster loaded into a fresh store so the dashboards have content."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.models import BookingStatus, FlightLogStatus, FlightType, MilestoneStatus, UserRole
from app.services.storage import TrainingStore
from app.utils import hash_password

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"


def _at(day: datetime, hour: int, minute: int = 0) -> datetime:
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)


def _date(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def seed_demo_data(store: TrainingStore, now: Optional[datetime] = None) -> None:
    """Populate two instructors, one student and their training history."""

    now = now or datetime.now(timezone.utc)
    password_hash = hash_password(DEMO_PASSWORD)

    sarah = store.create_user(
        username="sarahmiller",
        password_hash=password_hash,
        email="sarah.miller@example.com",
        first_name="Sarah",
        last_name="Miller",
        role=UserRole.INSTRUCTOR,
    )
    michael = store.create_user(
        username="michaelchen",
        password_hash=password_hash,
        email="michael.chen@example.com",
        first_name="Michael",
        last_name="Chen",
        role=UserRole.INSTRUCTOR,
    )
    alex = store.create_user(
        username="alexjohnson",
        password_hash=password_hash,
        email="alex.j@example.com",
        first_name="Alex",
        last_name="Johnson",
        role=UserRole.STUDENT,
    )

    skyhawk = store.create_aircraft(tail_number="N5434G", type="Cessna 172", model="Skyhawk")
    aerobat = store.create_aircraft(tail_number="N7711L", type="Cessna 152", model="Aerobat")
    archer = store.create_aircraft(tail_number="N2234A", type="Piper PA-28", model="Archer")

    milestones = [
        ("First Solo Flight", "Complete first solo flight", 20, MilestoneStatus.COMPLETED,
         100, _date(2023, 3, 15), sarah.id),
        ("Night Flying Proficiency", "Complete night flying training", 10,
         MilestoneStatus.COMPLETED, 100, _date(2023, 4, 2), michael.id),
        ("First Cross-Country Solo", "Complete first cross-country solo flight", 20,
         MilestoneStatus.IN_PROGRESS, 61, None, None),
        ("Instrument Rating", "Complete instrument rating training", 40,
         MilestoneStatus.NOT_STARTED, 0, None, None),
    ]
    for title, description, hours, status, progress, completed_on, approver in milestones:
        store.create_milestone(
            student_id=alex.id,
            title=title,
            description=description,
            required_hours=hours,
            status=status,
            progress=progress,
            completion_date=completed_on,
            approved_by=approver,
        )

    approved = FlightLogStatus.APPROVED
    flight_logs = [
        (sarah.id, skyhawk.id, _date(2023, 5, 10), 2.3, "KBOS", "KPVD", "KBOS", FlightType.DUAL, None, approved),
        (None, skyhawk.id, _date(2023, 5, 5), 1.5, "KBOS", "Local", None, FlightType.SOLO, None, approved),
        (michael.id, aerobat.id, _date(2023, 5, 2), 3.0, "KBOS", "KASH", "KBOS", FlightType.DUAL, None, approved),
        (sarah.id, archer.id, _date(2023, 4, 28), 4.5, "KBOS", "KBDL", "KBOS", FlightType.CROSS_COUNTRY, None, approved),
        (sarah.id, skyhawk.id, _date(2023, 4, 20), 2.0, "KBOS", "Local", None, FlightType.DUAL,
         "Night flying practice", approved),
        (None, skyhawk.id, _date(2023, 4, 15), 2.2, "KBOS", "KBED", "KBOS", FlightType.SOLO, None, approved),
        (michael.id, aerobat.id, _date(2023, 4, 10), 3.5, "KBOS", "KMHT", "KBOS", FlightType.CROSS_COUNTRY,
         None, approved),
        (sarah.id, skyhawk.id, _date(2023, 4, 5), 1.8, "KBOS", "Local", None, FlightType.DUAL,
         "Emergency procedures practice", approved),
        (None, skyhawk.id, now, 1.7, "KBOS", "KBED", "KBOS", FlightType.SOLO,
         "Pattern work and landings", FlightLogStatus.PENDING),
    ]
    for instructor_id, aircraft_id, flown_on, hours, dep, dest, ret, kind, notes, status in flight_logs:
        store.create_flight_log(
            student_id=alex.id,
            instructor_id=instructor_id,
            aircraft_id=aircraft_id,
            date=flown_on,
            duration=hours,
            departure_airport=dep,
            destination_airport=dest,
            return_airport=ret,
            flight_type=kind,
            notes=notes,
            status=status,
        )

    tomorrow = now + timedelta(days=1)
    day_after = now + timedelta(days=2)
    next_week = now + timedelta(days=7)
    next_month = now + timedelta(days=30)
    bookings = [
        (sarah.id, _at(tomorrow, 14), _at(tomorrow, 16), "pattern", skyhawk.id,
         BookingStatus.CONFIRMED, "Traffic Pattern Practice"),
        (michael.id, _at(day_after, 10), _at(day_after, 12), "maneuvers", aerobat.id,
         BookingStatus.CONFIRMED, "Slow Flight and Stall Practice"),
        (sarah.id, _at(next_week, 9), _at(next_week, 12), "navigation", skyhawk.id,
         BookingStatus.CONFIRMED, "VOR Navigation Practice"),
        (michael.id, _at(next_week + timedelta(days=3), 9), _at(next_week + timedelta(days=3), 13),
         "cross-country", skyhawk.id, BookingStatus.CONFIRMED, "Cross-Country Flight"),
        (sarah.id, _at(next_week + timedelta(days=6), 15, 30), _at(next_week + timedelta(days=6), 17, 30),
         "instrument", skyhawk.id, BookingStatus.CONFIRMED, "Instrument Training"),
        (sarah.id, _at(next_month, 13), _at(next_month, 15), "checkride-prep", skyhawk.id,
         BookingStatus.PENDING, "Checkride Preparation"),
    ]
    for instructor_id, start, end, training_type, aircraft_id, status, notes in bookings:
        store.create_booking(
            student_id=alex.id,
            instructor_id=instructor_id,
            start_time=start,
            end_time=end,
            training_type=training_type,
            aircraft_id=aircraft_id,
            status=status,
            notes=notes,
        )

    conversation = [
        (sarah.id, alex.id, "Hi Alex, just confirming our flight tomorrow at 2PM. "
         "Please arrive 30 minutes early for preflight.", 25, True),
        (alex.id, sarah.id, "Thanks for the reminder, Sarah! I'll be there at 1:30PM.", 24, True),
        (sarah.id, alex.id, "Great! Don't forget to bring your logbook and flight plan. "
         "We'll be focusing on pattern work.", 23, True),
        (michael.id, alex.id, "Hello Alex, I've reviewed your latest flight log. "
         "Good job on the cross-country navigation!", 10, False),
    ]
    for sender_id, receiver_id, content, hours_ago, is_read in conversation:
        store.create_message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            timestamp=now - timedelta(hours=hours_ago),
            is_read=is_read,
        )

    logger.info(
        "Demo data initialized: %d users, %d aircraft, %d flight logs, %d bookings",
        len(store.users),
        len(store.aircraft),
        len(store.flight_logs),
        len(store.bookings),
    )


__all__ = ["seed_demo_data", "DEMO_PASSWORD"]
