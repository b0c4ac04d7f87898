"""Shared utilities: clock and process helpers."""

from app.shared.utils.clock import python_version, uptime_seconds, utc_now_iso

__all__ = [
    "python_version",
    "uptime_seconds",
    "utc_now_iso",
]
