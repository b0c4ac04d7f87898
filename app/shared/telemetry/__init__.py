"""Logging setup and OpenTelemetry tracing (provider, instrumentation, span helpers)."""

from app.shared.telemetry.logging import setup_logging
from app.shared.telemetry.tracing import add_span_attributes, get_trace_id, traced

__all__ = [
    "add_span_attributes",
    "get_trace_id",
    "setup_logging",
    "traced",
]
