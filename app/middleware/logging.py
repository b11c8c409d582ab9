"""Structured logging middleware for FastAPI requests."""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from cryptography.fernet import Fernet
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.config.settings import settings

logger = logging.getLogger("app.middleware.structured")

COLOR_RESET = "\u001b[0m"
COLOR_GREEN = "\u001b[32m"
COLOR_CYAN = "\u001b[36m"
COLOR_YELLOW = "\u001b[33m"
COLOR_RED = "\u001b[31m"


@dataclass(slots=True)
class SessionContext:
    """Opaque descriptor of the authenticated caller for a log line."""

    identifier: str
    user_id: int | str
    role: Optional[str]


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one structured log line per HTTP request.

    The caller is taken from ``request.state.user``, which the session
    dependency fills in once the request is authenticated. Raw session
    tokens never reach the log.
    """

    _cipher: ClassVar[Optional[Fernet]] = None

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        log_payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": request.method,
            "url": str(request.url),
            "client_ip": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception as exc:
            log_payload["status_code"] = 500
            log_payload["duration_ms"] = self._elapsed_ms(start_time)
            log_payload["error"] = repr(exc)
            self._attach_session(request, log_payload)
            logger.exception(self._format_console_message(log_payload))
            raise

        log_payload["status_code"] = response.status_code
        log_payload["duration_ms"] = self._elapsed_ms(start_time)
        self._attach_session(request, log_payload)
        logger.info(self._format_console_message(log_payload))
        logger.debug(self._to_json(log_payload))
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        """Return elapsed milliseconds rounded to two decimals."""

        return round((time.perf_counter() - start_time) * 1000, 2)

    def _attach_session(self, request: Request, payload: dict[str, Any]) -> None:
        context = self._build_session_context(request, payload["timestamp"])
        if context is not None:
            payload["session"] = {
                "id": context.identifier,
                "user_id": context.user_id,
                "role": context.role,
            }

    def _build_session_context(
        self,
        request: Request,
        request_timestamp: str,
    ) -> SessionContext | None:
        """Construct an encrypted session descriptor for the current request."""

        user_obj = getattr(request.state, "user", None)
        resolved_id = self._resolve_user_id(user_obj)
        if resolved_id is None:
            return None

        role = user_obj.get("role") if isinstance(user_obj, dict) else None
        identifier_source = f"{resolved_id}:{request_timestamp}"
        fingerprint = hashlib.sha256(identifier_source.encode("utf-8")).hexdigest()

        encrypted_payload = {
            "session": fingerprint,
            "user_id": str(resolved_id),
            "role": role,
            "seen_at": request_timestamp,
        }
        if request.client:
            encrypted_payload["client_ip"] = request.client.host
        user_agent = request.headers.get("user-agent")
        if user_agent:
            encrypted_payload["user_agent"] = user_agent[:256]

        return SessionContext(
            identifier=self._encrypt_session_metadata(encrypted_payload),
            user_id=resolved_id,
            role=role,
        )

    @classmethod
    def _encrypt_session_metadata(cls, metadata: dict[str, Any]) -> str:
        """Encrypt session metadata into an opaque token."""

        cipher = cls._get_cipher()
        payload_bytes = json.dumps(metadata, default=str, separators=(",", ":")).encode(
            "utf-8"
        )
        return cipher.encrypt(payload_bytes).decode("utf-8")

    @classmethod
    def _get_cipher(cls) -> Fernet:
        """Return a cached Fernet cipher initialised from the session secret."""

        if cls._cipher is None:
            secret_bytes = (
                settings.security.session_secret_key.get_secret_value().encode("utf-8")
            )
            digest = hashlib.sha256(secret_bytes).digest()
            cls._cipher = Fernet(base64.urlsafe_b64encode(digest))
        return cls._cipher

    @staticmethod
    def _resolve_user_id(source: Any) -> int | str | None:
        """Extract the user identifier from a dict or an object carrying ``id``."""

        if source is None:
            return None

        if isinstance(source, dict):
            for key in ("id", "user_id", "userId"):
                value = source.get(key)
                if value is not None:
                    return value
            return None

        for attr in ("id", "user_id"):
            value = getattr(source, attr, None)
            if value is not None:
                return value
        return None

    @staticmethod
    def _format_console_message(payload: dict[str, Any]) -> str:
        """Return minimal request metadata wrapped with ANSI color codes."""

        status = payload.get("status_code") or 0
        if 200 <= status < 300:
            color = COLOR_GREEN
        elif 400 <= status < 500:
            color = COLOR_YELLOW
        elif status >= 500:
            color = COLOR_RED
        else:
            color = COLOR_CYAN

        user_id = None
        session_info = payload.get("session")
        if isinstance(session_info, dict):
            user_id = session_info.get("user_id")

        fields = [
            ("timestamp", payload.get("timestamp")),
            ("method", payload.get("method")),
            ("url", payload.get("url")),
            ("status", payload.get("status_code")),
            ("duration_ms", payload.get("duration_ms")),
            ("user_id", user_id),
        ]
        message = ", ".join(
            f"{name}={value if value is not None else '-'}" for name, value in fields
        )

        return f"{color}{message}{COLOR_RESET}"

    @staticmethod
    def _to_json(payload: dict[str, Any]) -> str:
        """Serialize payload as compact JSON."""

        return json.dumps(payload, default=str, separators=(",", ":"))
