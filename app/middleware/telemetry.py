"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.telemetry import observe_request

# Prometheus scrapes and health probes are not counted
UNOBSERVED_PATHS = frozenset({"/metrics", "/health"})


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Record count and latency of every API request for Prometheus."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in UNOBSERVED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # The route template is only known once routing has run
            observe_request(
                request.method,
                self._route_template(request),
                status_code,
                time.perf_counter() - start_time,
            )

    @staticmethod
    def _route_template(request: Request) -> str:
        """Prefer ``/api/bookings/{booking_id}`` over the concrete path."""

        route: Any = request.scope.get("route")
        path = getattr(route, "path", None)
        return path or request.url.path
