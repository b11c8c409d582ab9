"""Role-specific dashboard summaries."""

from __future__ import annotations

from fastapi import APIRouter

from app.controllers.dependencies import InstructorSessionDep, StoreDep, StudentSessionDep
from app.models import InstructorDashboard, StudentDashboard

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/student", response_model=StudentDashboard)
async def student_dashboard(
    store: StoreDep,
    session: StudentSessionDep,
) -> StudentDashboard:
    """Hours flown by type, the next three bookings, milestones and latest logs."""

    return store.get_student_dashboard(session.user_id)


@router.get("/instructor", response_model=InstructorDashboard)
async def instructor_dashboard(
    store: StoreDep,
    session: InstructorSessionDep,
) -> InstructorDashboard:
    return store.get_instructor_dashboard(session.user_id)
