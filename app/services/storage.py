"""In-memory storage for users, bookings, flight logs, milestones and messages."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from app.domain.services import (
    BookingDomainService,
    DomainError,
    MilestoneDomainService,
    ReferenceNotFoundError,
    StatusTransitionPolicy,
    booking_policy,
    flight_log_policy,
)
from app.models import (
    Aircraft,
    Booking,
    BookingStatus,
    FlightLog,
    FlightLogStatus,
    FlightType,
    InstructorDashboard,
    Message,
    MessageContact,
    Milestone,
    MilestoneStatus,
    StudentDashboard,
    User,
    UserRole,
)
from app.models.base import as_utc, utc_now

logger = logging.getLogger(__name__)

UPCOMING_BOOKINGS_LIMIT = 3
RECENT_LOGS_LIMIT = 3
PENDING_ITEMS_LIMIT = 5

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TrainingStore:
    """Owns every entity collection and its id counter.

    Lookups for unknown ids return ``None``; creation with a dangling
    reference raises ``ReferenceNotFoundError``.
    """

    def __init__(self, strict_transitions: bool = False):
        self.users: dict[int, User] = {}
        self.aircraft: dict[int, Aircraft] = {}
        self.bookings: dict[int, Booking] = {}
        self.flight_logs: dict[int, FlightLog] = {}
        self.milestones: dict[int, Milestone] = {}
        self.messages: dict[int, Message] = {}

        self._counters: dict[str, int] = {
            "users": 1,
            "aircraft": 1,
            "bookings": 1,
            "flight_logs": 1,
            "milestones": 1,
            "messages": 1,
        }

        # instructor id -> {student id: shared bookings + logs}, in order of association
        self._students_by_instructor: dict[int, dict[int, int]] = {}

        self.booking_transitions: StatusTransitionPolicy[BookingStatus] = booking_policy(
            strict_transitions
        )
        self.flight_log_transitions: StatusTransitionPolicy[FlightLogStatus] = (
            flight_log_policy(strict_transitions)
        )

    def _next_id(self, collection: str) -> int:
        value = self._counters[collection]
        self._counters[collection] = value + 1
        return value

    def _require_user(
        self,
        user_id: Optional[int],
        role: UserRole | None = None,
        field: str = "user",
    ) -> None:
        if user_id is None:
            return
        user = self.users.get(user_id)
        if user is None:
            raise ReferenceNotFoundError(f"{field} {user_id} does not exist")
        if role is not None and user.role != role:
            raise ReferenceNotFoundError(f"{field} {user_id} is not a {role.value}")

    def _require_aircraft(self, aircraft_id: Optional[int]) -> None:
        if aircraft_id is not None and aircraft_id not in self.aircraft:
            raise ReferenceNotFoundError(f"aircraft {aircraft_id} does not exist")

    def _link_student(self, instructor_id: Optional[int], student_id: int) -> None:
        if instructor_id is None:
            return
        students = self._students_by_instructor.setdefault(instructor_id, {})
        students[student_id] = students.get(student_id, 0) + 1

    def _unlink_student(self, instructor_id: Optional[int], student_id: int) -> None:
        students = self._students_by_instructor.get(instructor_id)
        if not students or student_id not in students:
            return
        students[student_id] -= 1
        if students[student_id] <= 0:
            del students[student_id]

    # ------------------------------------------------------------------ users

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        lowered = email.lower()
        return next((u for u in self.users.values() if u.email.lower() == lowered), None)

    def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        email: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.STUDENT,
        profile_image: Optional[str] = None,
    ) -> User:
        """Insert a user; callers check username/email uniqueness first."""

        user = User(
            id=self._next_id("users"),
            username=username,
            password_hash=password_hash,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            profile_image=profile_image,
        )
        self.users[user.id] = user
        logger.info("Created %s account %s (id=%s)", user.role.value, user.username, user.id)
        return user

    def get_instructors(self) -> list[User]:
        return [u for u in self.users.values() if u.role == UserRole.INSTRUCTOR]

    def get_students(self) -> list[User]:
        return [u for u in self.users.values() if u.role == UserRole.STUDENT]

    def get_students_by_instructor(self, instructor_id: int) -> list[User]:
        """Students sharing at least one booking or flight log with the instructor."""

        student_ids = self._students_by_instructor.get(instructor_id, {})
        return [self.users[sid] for sid in student_ids if sid in self.users]

    # --------------------------------------------------------------- aircraft

    def get_aircraft(self, aircraft_id: int) -> Optional[Aircraft]:
        return self.aircraft.get(aircraft_id)

    def get_all_aircraft(self) -> list[Aircraft]:
        return list(self.aircraft.values())

    def create_aircraft(self, *, tail_number: str, type: str, model: str) -> Aircraft:
        if any(a.tail_number == tail_number for a in self.aircraft.values()):
            raise DomainError(f"Aircraft {tail_number} already exists")
        aircraft = Aircraft(
            id=self._next_id("aircraft"),
            tail_number=tail_number,
            type=type,
            model=model,
        )
        self.aircraft[aircraft.id] = aircraft
        return aircraft

    # --------------------------------------------------------------- bookings

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self.bookings.get(booking_id)

    def get_bookings_by_student(self, student_id: int) -> list[Booking]:
        return sorted(
            (b for b in self.bookings.values() if b.student_id == student_id),
            key=lambda b: b.start_time,
        )

    def get_bookings_by_instructor(self, instructor_id: int) -> list[Booking]:
        return sorted(
            (b for b in self.bookings.values() if b.instructor_id == instructor_id),
            key=lambda b: b.start_time,
        )

    def create_booking(
        self,
        *,
        student_id: int,
        start_time: datetime,
        end_time: datetime,
        training_type: str,
        instructor_id: Optional[int] = None,
        aircraft_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        notes: Optional[str] = None,
    ) -> Booking:
        if not BookingDomainService.is_time_range_valid(as_utc(start_time), as_utc(end_time)):
            raise DomainError("Booking end time must be after its start time")
        self._require_user(student_id, UserRole.STUDENT, "student")
        self._require_user(instructor_id, UserRole.INSTRUCTOR, "instructor")
        self._require_aircraft(aircraft_id)

        booking = Booking(
            id=self._next_id("bookings"),
            student_id=student_id,
            instructor_id=instructor_id,
            start_time=start_time,
            end_time=end_time,
            training_type=training_type,
            aircraft_id=aircraft_id,
            status=status or BookingStatus.PENDING,
            notes=notes,
        )
        self.bookings[booking.id] = booking
        self._link_student(instructor_id, student_id)
        logger.info(
            "Booking %s requested by student %s (%s)",
            booking.id,
            student_id,
            training_type,
        )
        return booking

    def update_booking_status(self, booking_id: int, status: BookingStatus) -> Optional[Booking]:
        booking = self.bookings.get(booking_id)
        if booking is None:
            return None

        self.booking_transitions.check(booking.status, status)
        updated = booking.model_copy(update={"status": status})
        self.bookings[booking_id] = updated
        logger.info("Booking %s moved %s -> %s", booking_id, booking.status.value, status.value)
        return updated

    # ------------------------------------------------------------ flight logs

    def get_flight_log(self, log_id: int) -> Optional[FlightLog]:
        return self.flight_logs.get(log_id)

    def get_flight_logs_by_student(self, student_id: int) -> list[FlightLog]:
        return sorted(
            (log for log in self.flight_logs.values() if log.student_id == student_id),
            key=lambda log: log.date,
            reverse=True,
        )

    def get_recent_flight_logs_by_student(self, student_id: int, limit: int) -> list[FlightLog]:
        return self.get_flight_logs_by_student(student_id)[:limit]

    def get_pending_flight_logs_by_instructor(self, instructor_id: int) -> list[FlightLog]:
        return [
            log
            for log in self.flight_logs.values()
            if log.instructor_id == instructor_id and log.status == FlightLogStatus.PENDING
        ]

    def create_flight_log(
        self,
        *,
        student_id: int,
        aircraft_id: int,
        date: datetime,
        duration: float,
        departure_airport: str,
        destination_airport: str,
        flight_type: FlightType,
        instructor_id: Optional[int] = None,
        return_airport: Optional[str] = None,
        notes: Optional[str] = None,
        status: Optional[FlightLogStatus] = None,
    ) -> FlightLog:
        if duration <= 0:
            raise DomainError("Flight duration must be greater than zero")
        self._require_user(student_id, UserRole.STUDENT, "student")
        self._require_user(instructor_id, UserRole.INSTRUCTOR, "instructor")
        self._require_aircraft(aircraft_id)

        log = FlightLog(
            id=self._next_id("flight_logs"),
            student_id=student_id,
            instructor_id=instructor_id,
            aircraft_id=aircraft_id,
            date=date,
            duration=duration,
            departure_airport=departure_airport,
            destination_airport=destination_airport,
            return_airport=return_airport,
            flight_type=flight_type,
            notes=notes,
            status=status or FlightLogStatus.PENDING,
        )
        self.flight_logs[log.id] = log
        self._link_student(instructor_id, student_id)
        logger.info(
            "Flight log %s recorded for student %s: %.1fh %s",
            log.id,
            student_id,
            duration,
            log.flight_type.value,
        )
        return log

    def update_flight_log_status(
        self,
        log_id: int,
        status: FlightLogStatus,
        instructor_id: Optional[int] = None,
    ) -> Optional[FlightLog]:
        """Set the review status, recording the reviewer when one is given."""

        log = self.flight_logs.get(log_id)
        if log is None:
            return None

        self.flight_log_transitions.check(log.status, status)
        reviewer = instructor_id or log.instructor_id
        updated = log.model_copy(update={"status": status, "instructor_id": reviewer})
        self.flight_logs[log_id] = updated
        if reviewer != log.instructor_id:
            self._unlink_student(log.instructor_id, log.student_id)
            self._link_student(reviewer, log.student_id)
        logger.info("Flight log %s moved %s -> %s", log_id, log.status.value, status.value)
        return updated

    # ------------------------------------------------------------- milestones

    def get_milestone(self, milestone_id: int) -> Optional[Milestone]:
        return self.milestones.get(milestone_id)

    def get_milestones_by_student(self, student_id: int) -> list[Milestone]:
        return [m for m in self.milestones.values() if m.student_id == student_id]

    def create_milestone(
        self,
        *,
        student_id: int,
        title: str,
        description: Optional[str] = None,
        required_hours: Optional[float] = None,
        status: Optional[MilestoneStatus] = None,
        completion_date: Optional[datetime] = None,
        approved_by: Optional[int] = None,
        progress: Optional[float] = None,
    ) -> Milestone:
        self._require_user(student_id, UserRole.STUDENT, "student")
        self._require_user(approved_by, UserRole.INSTRUCTOR, "approver")

        milestone = Milestone(
            id=self._next_id("milestones"),
            student_id=student_id,
            title=title,
            description=description,
            required_hours=required_hours,
            status=status or MilestoneStatus.NOT_STARTED,
            completion_date=completion_date,
            approved_by=approved_by,
            progress=MilestoneDomainService.clamp_progress(progress or 0),
        )
        self.milestones[milestone.id] = milestone
        logger.info("Milestone %s '%s' created for student %s", milestone.id, title, student_id)
        return milestone

    def update_milestone_progress(
        self,
        milestone_id: int,
        progress: float,
        status: Optional[MilestoneStatus] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Milestone]:
        milestone = self.milestones.get(milestone_id)
        if milestone is None:
            return None

        progress = MilestoneDomainService.clamp_progress(progress)
        new_status = MilestoneDomainService.derive_status(milestone.status, progress, status)
        completion_date = milestone.completion_date
        if new_status == MilestoneStatus.COMPLETED and completion_date is None:
            completion_date = now or utc_now()

        updated = milestone.model_copy(
            update={
                "progress": progress,
                "status": new_status,
                "completion_date": completion_date,
            }
        )
        self.milestones[milestone_id] = updated
        return updated

    def complete_milestone(
        self,
        milestone_id: int,
        instructor_id: int,
        now: Optional[datetime] = None,
    ) -> Optional[Milestone]:
        """Sign off a milestone; an existing completion date is preserved."""

        milestone = self.milestones.get(milestone_id)
        if milestone is None:
            return None

        updated = milestone.model_copy(
            update={
                "status": MilestoneStatus.COMPLETED,
                "progress": 100.0,
                "approved_by": instructor_id,
                "completion_date": milestone.completion_date or now or utc_now(),
            }
        )
        self.milestones[milestone_id] = updated
        logger.info("Milestone %s signed off by instructor %s", milestone_id, instructor_id)
        return updated

    # ------------------------------------------------------------- dashboards

    @staticmethod
    def _sum_hours(logs: Iterable[FlightLog], flight_type: FlightType | None = None) -> float:
        return sum(
            log.duration
            for log in logs
            if flight_type is None or log.flight_type == flight_type
        )

    def get_student_dashboard(self, student_id: int, now: Optional[datetime] = None) -> StudentDashboard:
        now = as_utc(now) if now else utc_now()
        logs = self.get_flight_logs_by_student(student_id)
        upcoming = [b for b in self.get_bookings_by_student(student_id) if b.start_time > now]

        return StudentDashboard(
            total_hours=self._sum_hours(logs),
            solo_hours=self._sum_hours(logs, FlightType.SOLO),
            cross_country_hours=self._sum_hours(logs, FlightType.CROSS_COUNTRY),
            upcoming_bookings=upcoming[:UPCOMING_BOOKINGS_LIMIT],
            milestones=self.get_milestones_by_student(student_id),
            recent_logs=logs[:RECENT_LOGS_LIMIT],
        )

    def get_instructor_dashboard(
        self,
        instructor_id: int,
        now: Optional[datetime] = None,
    ) -> InstructorDashboard:
        now = as_utc(now) if now else utc_now()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)

        own_bookings = [b for b in self.bookings.values() if b.instructor_id == instructor_id]
        pending = [b for b in own_bookings if b.status == BookingStatus.PENDING]
        todays = sorted(
            (b for b in own_bookings if today <= b.start_time < tomorrow),
            key=lambda b: b.start_time,
        )

        return InstructorDashboard(
            total_students=len(self.get_students_by_instructor(instructor_id)),
            pending_bookings=pending[:PENDING_ITEMS_LIMIT],
            today_bookings=todays,
            pending_logs=self.get_pending_flight_logs_by_instructor(instructor_id)[:PENDING_ITEMS_LIMIT],
        )

    # --------------------------------------------------------------- messages

    def get_message(self, message_id: int) -> Optional[Message]:
        return self.messages.get(message_id)

    def get_messages_between_users(self, user_id: int, other_id: int) -> list[Message]:
        return sorted(
            (
                m
                for m in self.messages.values()
                if (m.sender_id == user_id and m.receiver_id == other_id)
                or (m.sender_id == other_id and m.receiver_id == user_id)
            ),
            key=lambda m: m.timestamp,
        )

    def get_messages_for_user(self, user_id: int) -> list[Message]:
        return sorted(
            (m for m in self.messages.values() if user_id in (m.sender_id, m.receiver_id)),
            key=lambda m: m.timestamp,
            reverse=True,
        )

    def create_message(
        self,
        *,
        sender_id: int,
        receiver_id: int,
        content: str,
        timestamp: Optional[datetime] = None,
        is_read: bool = False,
    ) -> Message:
        self._require_user(sender_id, field="sender")
        self._require_user(receiver_id, field="receiver")

        message = Message(
            id=self._next_id("messages"),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            timestamp=timestamp or utc_now(),
            is_read=is_read,
        )
        self.messages[message.id] = message
        logger.info("Message %s sent from %s to %s", message.id, sender_id, receiver_id)
        return message

    def mark_messages_as_read(self, sender_id: int, receiver_id: int) -> int:
        """Flag every unread message from sender to receiver as read."""

        unread = [
            m
            for m in self.messages.values()
            if m.sender_id == sender_id and m.receiver_id == receiver_id and not m.is_read
        ]
        for message in unread:
            self.messages[message.id] = message.model_copy(update={"is_read": True})
        return len(unread)

    def get_message_contacts(self, user_id: int) -> list[MessageContact]:
        contact_ids: dict[int, None] = {}
        for message in self.messages.values():
            if message.sender_id == user_id:
                contact_ids[message.receiver_id] = None
            elif message.receiver_id == user_id:
                contact_ids[message.sender_id] = None

        contacts: list[MessageContact] = []
        for contact_id in contact_ids:
            contact = self.users.get(contact_id)
            if contact is None:
                continue

            conversation = self.get_messages_between_users(user_id, contact_id)
            last = conversation[-1] if conversation else None
            contacts.append(
                MessageContact(
                    id=contact_id,
                    name=contact.full_name,
                    role=contact.role.value,
                    last_message=last.content if last else None,
                    last_message_time=last.timestamp if last else None,
                    unread_count=sum(
                        1 for m in conversation if m.sender_id == contact_id and not m.is_read
                    ),
                    profile_image=contact.profile_image,
                )
            )

        # Most recent conversation first; contacts without a timestamp last
        return sorted(
            contacts,
            key=lambda c: (c.last_message_time is not None, c.last_message_time or _EPOCH),
            reverse=True,
        )


__all__ = [
    "TrainingStore",
    "UPCOMING_BOOKINGS_LIMIT",
    "RECENT_LOGS_LIMIT",
    "PENDING_ITEMS_LIMIT",
]
