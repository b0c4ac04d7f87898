"""HTTP middleware: timeout, request logging, security headers, HTTP cache headers.

All raw ASGI factories (no BaseHTTPMiddleware), so streaming responses and
background tasks such as cache writes pass through untouched. Installed by
app.main in outermost-last order.
"""

from app.middleware.cache_control import CacheControlMiddleware
from app.middleware.request_logging import RequestLoggingMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.middleware.timeout import TimeoutMiddleware

__all__ = [
    "CacheControlMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
