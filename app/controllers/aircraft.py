"""Aircraft reference data."""

from __future__ import annotations

from fastapi import APIRouter

from app.controllers.dependencies import CurrentSessionDep, StoreDep
from app.models import Aircraft

router = APIRouter(prefix="/api/aircraft", tags=["aircraft"])


@router.get("", response_model=list[Aircraft])
async def list_aircraft(
    store: StoreDep,
    _session: CurrentSessionDep,
) -> list[Aircraft]:
    return store.get_all_aircraft()
