"""User directory endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from app.controllers.dependencies import CurrentSessionDep, InstructorSessionDep, StoreDep
from app.views import UserSummary

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/users/instructors", response_model=list[UserSummary])
async def list_instructors(
    store: StoreDep,
    _session: CurrentSessionDep,
) -> list[UserSummary]:
    return [UserSummary.model_validate(user) for user in store.get_instructors()]


@router.get("/instructor/students", response_model=list[UserSummary])
async def list_my_students(
    store: StoreDep,
    session: InstructorSessionDep,
) -> list[UserSummary]:
    """Students who have any booking or flight log with the calling instructor."""

    students = store.get_students_by_instructor(session.user_id)
    return [UserSummary.model_validate(student) for student in students]
