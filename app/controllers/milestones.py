"""Training milestones: listing, progress tracking and instructor sign-off."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.controllers.dependencies import (
    CurrentSessionDep,
    InstructorSessionDep,
    StoreDep,
    StudentSessionDep,
)
from app.models import Milestone, UserRole
from app.services.storage import TrainingStore
from app.telemetry import record_created
from app.views import MilestoneCreateRequest, MilestoneProgressUpdate

router = APIRouter(prefix="/api/milestones", tags=["milestones"])


def _get_milestone_or_404(store: TrainingStore, milestone_id: int) -> Milestone:
    milestone = store.get_milestone(milestone_id)
    if milestone is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Milestone not found",
        )
    return milestone


@router.get("", response_model=list[Milestone])
async def list_my_milestones(
    store: StoreDep,
    session: StudentSessionDep,
) -> list[Milestone]:
    return store.get_milestones_by_student(session.user_id)


@router.get("/student/{student_id}", response_model=list[Milestone])
async def list_student_milestones(
    student_id: int,
    store: StoreDep,
    _session: InstructorSessionDep,
) -> list[Milestone]:
    return store.get_milestones_by_student(student_id)


@router.post("", response_model=Milestone, status_code=status.HTTP_201_CREATED)
async def create_milestone(
    payload: MilestoneCreateRequest,
    store: StoreDep,
    _session: InstructorSessionDep,
) -> Milestone:
    milestone = store.create_milestone(**payload.model_dump())
    record_created("milestone")
    return milestone


@router.patch("/{milestone_id}/progress", response_model=Milestone)
async def update_milestone_progress(
    milestone_id: int,
    payload: MilestoneProgressUpdate,
    store: StoreDep,
    session: CurrentSessionDep,
) -> Milestone:
    """Report progress; reaching 100 completes the milestone.

    Students may only update their own milestones.
    """

    milestone = _get_milestone_or_404(store, milestone_id)
    if session.role == UserRole.STUDENT and milestone.student_id != session.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden. Insufficient permissions.",
        )

    return store.update_milestone_progress(milestone_id, payload.progress, payload.status)


@router.patch("/{milestone_id}/complete", response_model=Milestone)
async def complete_milestone(
    milestone_id: int,
    store: StoreDep,
    session: InstructorSessionDep,
) -> Milestone:
    _get_milestone_or_404(store, milestone_id)
    return store.complete_milestone(milestone_id, session.user_id)
