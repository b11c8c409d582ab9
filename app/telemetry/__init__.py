"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    LOGIN_COUNTER,
    RECORDS_CREATED,
    REGISTRATION_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    increment_login,
    increment_registration,
    observe_request,
    record_created,
)

__all__ = [
    "ERROR_COUNTER",
    "LOGIN_COUNTER",
    "RECORDS_CREATED",
    "REGISTRATION_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "increment_login",
    "increment_registration",
    "observe_request",
    "record_created",
]
