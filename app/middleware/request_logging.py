"""Request logging middleware.

Logs method, URL, status and duration once the response has started.
5xx responses log at ERROR, 4xx at WARNING, everything else at DEBUG.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming and background tasks.
"""

import logging
import time
from typing import Callable

from app.shared.telemetry.tracing import get_trace_id

logger = logging.getLogger(__name__)


def _client_ip(scope: dict) -> str | None:
    for k, v in scope.get("headers", []):
        if k.lower() == b"x-forwarded-for":
            return v.decode("latin-1").split(",")[0].strip()
    client = scope.get("client")
    return client[0] if client else None


def RequestLoggingMiddleware(app: Callable) -> Callable:
    """Log one line per HTTP request with its outcome. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        start = time.perf_counter()
        status_holder: dict[str, int] = {}

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
            await send(message)

        try:
            await app(scope, receive, send_wrapper)
        finally:
            status = status_holder.get("status", 500)
            duration_ms = (time.perf_counter() - start) * 1000
            query = scope.get("query_string", b"").decode("latin-1")
            url = scope.get("path", "") + (f"?{query}" if query else "")
            if status >= 500:
                level = logging.ERROR
            elif status >= 400:
                level = logging.WARNING
            else:
                level = logging.DEBUG
            logger.log(
                level,
                "%s %s -> %s (%.1fms) ip=%s trace_id=%s",
                scope.get("method", ""),
                url,
                status,
                duration_ms,
                _client_ip(scope),
                get_trace_id(),
            )

    return asgi_app
