"""Timestamps and process facts reported by the health and sync endpoints."""

import platform
import time
from datetime import UTC, datetime

_STARTED_AT = time.monotonic()


def utc_now_iso() -> str:
    """Current UTC time as ISO 8601 with milliseconds and a Z suffix.

    Example: ``2026-10-18T09:30:00.123Z``.
    """
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def uptime_seconds() -> float:
    """Seconds since the app package was imported, rounded to milliseconds."""
    return round(time.monotonic() - _STARTED_AT, 3)


def python_version() -> str:
    return platform.python_version()
