"""Service layer: the training store, sessions and demo data."""

from .sessions import SessionRecord, SessionRegistry
from .storage import TrainingStore

__all__ = [
    "SessionRecord",
    "SessionRegistry",
    "TrainingStore",
]
