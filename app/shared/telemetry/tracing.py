"""Span helpers for cache operations and request log lines.

No-ops when telemetry is disabled: the default global tracer provider
hands out non-recording spans.
"""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_tracer = trace.get_tracer("app.cache")

AttributeValue = str | int | float | bool


def traced(
    operation_name: str,
    arguments: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Run an async function inside a span named operation_name.

    Each name in arguments is read from the call's bound arguments and set
    as ``<operation_name>.<name>``; an int/bool/str result is recorded as
    ``<operation_name>.result``.

    Raises:
        TypeError: If the decorated function is not async.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() supports async functions only: {func.__qualname__}")
        sig = inspect.signature(func)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with _tracer.start_as_current_span(operation_name) as span:
                if arguments and span.is_recording():
                    bound = sig.bind(*args, **kwargs)
                    bound.apply_defaults()
                    for name in arguments:
                        value = bound.arguments.get(name)
                        if isinstance(value, AttributeValue):
                            span.set_attribute(f"{operation_name}.{name}", value)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise
                if isinstance(result, AttributeValue):
                    span.set_attribute(f"{operation_name}.result", result)
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: AttributeValue) -> None:
    """Tag the current span (e.g. the request span) when it is recording."""
    span = trace.get_current_span()
    if not span.is_recording():
        return
    for key, value in attributes.items():
        span.set_attribute(key, value)


def get_trace_id() -> str | None:
    """Current trace id as 32 hex chars, for correlating log lines with traces."""
    ctx = trace.get_current_span().get_span_context()
    return format(ctx.trace_id, "032x") if ctx.is_valid else None
