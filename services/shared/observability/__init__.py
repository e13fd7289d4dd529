"""
Shared observability helpers (telemetry, privacy utilities, etc.).

The workbook service imports from this package to enable consistent
instrumentation and keep budget figures out of logs.
"""

from .privacy import describe_upload, fingerprint_bytes
from .telemetry import (
    CORRELATION_ID_HEADER,
    RequestContextToken,
    bind_request_context,
    ensure_request_id,
    reset_request_context,
    setup_telemetry,
)

__all__ = [
    "describe_upload",
    "fingerprint_bytes",
    "CORRELATION_ID_HEADER",
    "RequestContextToken",
    "bind_request_context",
    "ensure_request_id",
    "reset_request_context",
    "setup_telemetry",
]
