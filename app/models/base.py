"""Shared base for in-memory entity records."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def as_utc(value: datetime | None) -> datetime | None:
    """Return an aware UTC datetime; naive values are assumed to be UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(BaseModel):
    """Immutable record stored by the training store.

    Attributes are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )


__all__ = ["Base", "as_utc", "utc_now"]
