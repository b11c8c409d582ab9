"""Server-side session registry backing the signed session cookie."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.config.settings import settings
from app.models.user import User, UserRole
from app.utils import AuthenticationError, create_session_token, decode_session_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """Identity recorded for an authenticated session."""

    session_id: str
    user_id: int
    role: UserRole
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at


class SessionRegistry:
    """Tracks live sessions; a token is only honoured while its id is registered.

    Sessions end either on logout or when their fixed absolute lifetime
    runs out. There is no sliding renewal.
    """

    def __init__(self, lifetime: Optional[timedelta] = None):
        self.lifetime = lifetime or timedelta(hours=settings.security.session_lifetime_hours)
        self._sessions: dict[str, SessionRecord] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def issue(self, user: User) -> tuple[str, SessionRecord]:
        """Open a session for the user and return ``(token, record)``."""

        self.purge_expired()
        now = datetime.now(timezone.utc)
        record = SessionRecord(
            session_id=secrets.token_urlsafe(24),
            user_id=user.id,
            role=user.role,
            issued_at=now,
            expires_at=now + self.lifetime,
        )
        self._sessions[record.session_id] = record
        token = create_session_token(
            subject=str(user.id),
            session_id=record.session_id,
            role=user.role.value,
            issued_at=now,
            expires_delta=self.lifetime,
        )
        logger.info("Opened session for user %s (%s)", user.id, user.role.value)
        return token, record

    def resolve(self, token: str) -> SessionRecord:
        """Return the live session behind a token or raise ``AuthenticationError``."""

        claims = decode_session_token(token)
        record = self._sessions.get(claims.sid)
        if record is None or str(record.user_id) != claims.sub:
            raise AuthenticationError("Session is no longer active")
        if record.is_expired():
            self._sessions.pop(record.session_id, None)
            raise AuthenticationError("Session has expired")
        return record

    def revoke(self, token: str) -> bool:
        """Destroy the session behind a token; unknown tokens are ignored."""

        try:
            claims = decode_session_token(token)
        except AuthenticationError:
            return False

        record = self._sessions.pop(claims.sid, None)
        if record is not None:
            logger.info("Closed session for user %s", record.user_id)
        return record is not None

    def purge_expired(self) -> int:
        now = datetime.now(timezone.utc)
        expired = [sid for sid, record in self._sessions.items() if record.is_expired(now)]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)


__all__ = ["SessionRecord", "SessionRegistry"]
