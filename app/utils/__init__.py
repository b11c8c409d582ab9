"""Utility helpers for the flight training backend."""

from .security import (
    AuthenticationError,
    SessionClaims,
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_session_token",
    "decode_session_token",
    "AuthenticationError",
    "SessionClaims",
]
