import hashlib
from typing import Any


def fingerprint_bytes(payload: bytes | None) -> str:
    """
    Return a stable SHA-256 hex digest for an uploaded file without leaking its contents.

    Budget workbooks carry personal income figures, so logs reference uploads by
    digest and size only.
    """

    return hashlib.sha256(payload or b"").hexdigest()


def describe_upload(filename: str | None, payload: bytes | None) -> dict[str, Any]:
    """Build the log-safe description of an uploaded workbook."""

    return {
        "filename": filename or None,
        "size_bytes": len(payload or b""),
        "sha256": fingerprint_bytes(payload),
    }
