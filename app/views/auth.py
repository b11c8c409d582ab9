"""Pydantic schemas related to authentication."""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from app.models.user import UserRole
from app.views.common import CamelModel


class LoginRequest(CamelModel):
    """Credentials submitted to open a session."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class RegisterRequest(CamelModel):
    """Request model for account registration."""

    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=8, max_length=128)
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    role: UserRole = UserRole.STUDENT
    profile_image: Optional[str] = None


class UserProfile(CamelModel):
    """Profile returned by the auth endpoints; never carries credentials."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    profile_image: Optional[str] = None


__all__ = ["LoginRequest", "RegisterRequest", "UserProfile"]
