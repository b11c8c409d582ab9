"""Pydantic schemas for user lookups."""

from __future__ import annotations

from typing import Optional

from app.views.common import CamelModel


class UserSummary(CamelModel):
    """Public subset of a user shown in instructor and student pickers."""

    id: int
    first_name: str
    last_name: str
    email: str
    profile_image: Optional[str] = None


__all__ = ["UserSummary"]
