"""Booking requests and instructor confirmation."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.controllers.dependencies import (
    CurrentSessionDep,
    InstructorSessionDep,
    StoreDep,
    StudentSessionDep,
    resolve_student_id,
)
from app.models import Booking, UserRole
from app.telemetry import record_created
from app.views import BookingCreateRequest, BookingStatusUpdate

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.get("/student", response_model=list[Booking])
async def list_student_bookings(
    store: StoreDep,
    session: StudentSessionDep,
) -> list[Booking]:
    return store.get_bookings_by_student(session.user_id)


@router.get("/instructor", response_model=list[Booking])
async def list_instructor_bookings(
    store: StoreDep,
    session: InstructorSessionDep,
) -> list[Booking]:
    return store.get_bookings_by_instructor(session.user_id)


@router.get("/{booking_id}", response_model=Booking)
async def get_booking(
    booking_id: int,
    store: StoreDep,
    session: CurrentSessionDep,
) -> Booking:
    booking = store.get_booking(booking_id)
    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    if session.role == UserRole.STUDENT and booking.student_id != session.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden. Insufficient permissions.",
        )
    return booking


@router.post("", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreateRequest,
    store: StoreDep,
    session: CurrentSessionDep,
) -> Booking:
    """Request a training session; new bookings start as pending."""

    student_id = resolve_student_id(session, payload.student_id)
    booking = store.create_booking(
        **payload.model_dump(exclude={"student_id"}),
        student_id=student_id,
    )
    record_created("booking")
    return booking


@router.patch("/{booking_id}/status", response_model=Booking)
async def update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    store: StoreDep,
    _session: InstructorSessionDep,
) -> Booking:
    booking = store.update_booking_status(booking_id, payload.status)
    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking
