"""Security helpers for password hashing and signed session tokens."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from app.config.settings import settings

_SALT_BYTES = 16
_ITERATIONS = 120_000


def hash_password(password: str) -> str:
    """Return a salted PBKDF2 hash for the supplied password."""

    salt = os.urandom(_SALT_BYTES)
    derived = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _ITERATIONS,
    )
    return base64.b64encode(salt + derived).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check whether the provided password matches the stored hash."""

    try:
        decoded = base64.b64decode(hashed.encode("utf-8"), validate=True)
    except (ValueError, TypeError):
        return False
    if len(decoded) <= _SALT_BYTES:
        return False

    salt = decoded[:_SALT_BYTES]
    stored = decoded[_SALT_BYTES:]
    candidate = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _ITERATIONS,
    )
    return hmac.compare_digest(candidate, stored)


class AuthenticationError(Exception):
    """Raised when a session token cannot be decoded or is otherwise invalid."""


class SessionClaims(BaseModel):
    """Payload embedded in signed session tokens."""

    sub: str
    sid: str
    role: str
    exp: datetime
    iat: datetime | None = None


def create_session_token(
    subject: str,
    session_id: str,
    role: str,
    issued_at: Optional[datetime] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a session token for the given user and server-side session id."""

    now = issued_at or datetime.now(timezone.utc)
    expires_delta = expires_delta or timedelta(
        hours=settings.security.session_lifetime_hours
    )
    to_encode: dict[str, Any] = {
        "sub": subject,
        "sid": session_id,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }

    secret = settings.security.session_secret_key.get_secret_value()
    return jwt.encode(
        to_encode,
        secret,
        algorithm=settings.security.session_algorithm,
    )


def decode_session_token(token: str) -> SessionClaims:
    """Decode and validate a session token, returning its claims."""

    secret = settings.security.session_secret_key.get_secret_value()
    try:
        payload = jwt.decode(
            token, secret, algorithms=[settings.security.session_algorithm]
        )
        return SessionClaims.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid session token") from exc


__all__ = [
    "hash_password",
    "verify_password",
    "create_session_token",
    "decode_session_token",
    "AuthenticationError",
    "SessionClaims",
]
