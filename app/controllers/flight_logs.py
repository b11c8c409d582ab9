"""Flight log submission and instructor review."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.controllers.dependencies import (
    CurrentSessionDep,
    InstructorSessionDep,
    StoreDep,
    StudentSessionDep,
    resolve_student_id,
)
from app.models import FlightLog
from app.telemetry import record_created
from app.views import FlightLogCreateRequest, FlightLogStatusUpdate

router = APIRouter(prefix="/api/flightlogs", tags=["flight-logs"])


@router.get("", response_model=list[FlightLog])
async def list_my_flight_logs(
    store: StoreDep,
    session: StudentSessionDep,
) -> list[FlightLog]:
    """The calling student's logbook, newest flight first."""

    return store.get_flight_logs_by_student(session.user_id)


@router.get("/instructor", response_model=list[FlightLog])
async def list_pending_reviews(
    store: StoreDep,
    session: InstructorSessionDep,
) -> list[FlightLog]:
    return store.get_pending_flight_logs_by_instructor(session.user_id)


@router.post("", response_model=FlightLog, status_code=status.HTTP_201_CREATED)
async def create_flight_log(
    payload: FlightLogCreateRequest,
    store: StoreDep,
    session: CurrentSessionDep,
) -> FlightLog:
    student_id = resolve_student_id(session, payload.student_id)
    log = store.create_flight_log(
        **payload.model_dump(exclude={"student_id"}),
        student_id=student_id,
    )
    record_created("flight_log")
    return log


@router.patch("/{log_id}/status", response_model=FlightLog)
async def update_flight_log_status(
    log_id: int,
    payload: FlightLogStatusUpdate,
    store: StoreDep,
    session: InstructorSessionDep,
) -> FlightLog:
    """Approve or reject a log; the reviewing instructor is recorded on it."""

    log = store.update_flight_log_status(log_id, payload.status, instructor_id=session.user_id)
    if log is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Flight log not found",
        )
    return log
