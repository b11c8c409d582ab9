"""Pydantic schemas for direct messaging."""

from __future__ import annotations

from pydantic import Field

from app.views.common import CamelModel


class MessageCreateRequest(CamelModel):
    receiver_id: int = Field(..., ge=1)
    content: str = Field(..., min_length=1, max_length=4000)


class MarkReadResponse(CamelModel):
    message: str
    updated: int


__all__ = ["MessageCreateRequest", "MarkReadResponse"]
