"""Aircraft reference records."""

from __future__ import annotations

from app.models.base import Base


class Aircraft(Base):
    """A training aircraft, e.g. ``N5434G`` Cessna 172 Skyhawk."""

    id: int
    tail_number: str
    type: str
    model: str


__all__ = ["Aircraft"]
