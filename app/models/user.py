"""User records for students and instructors."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from app.models.base import Base


class UserRole(str, Enum):
    """Enumeration of supported user roles."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"


class User(Base):
    id: int
    username: str
    password_hash: str = Field(exclude=True, repr=False)
    email: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.STUDENT
    profile_image: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_instructor(self) -> bool:
        return self.role == UserRole.INSTRUCTOR


__all__ = ["User", "UserRole"]
