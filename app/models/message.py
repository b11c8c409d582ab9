"""Direct messages exchanged between users."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from app.models.base import Base, as_utc


class Message(Base):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    timestamp: datetime
    is_read: bool = False

    @field_validator("timestamp")
    @classmethod
    def _normalise_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)


class MessageContact(Base):
    """Conversation summary for one counterpart of the current user."""

    id: int
    name: str
    role: str
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    unread_count: int = 0
    profile_image: Optional[str] = None


__all__ = ["Message", "MessageContact"]
