"""Browser hardening headers for storefront pages and API responses.

Frame options, MIME sniffing, XSS filter, referrer policy and a CSP that
allows the storefront's inline scripts/styles and remote product images.
"""

from typing import Callable

from app.middleware.headers import DefaultHeadersMiddleware, encode_headers

DEFAULT_HEADERS = {
    "X-Frame-Options": "SAMEORIGIN",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' 'unsafe-inline'; "
        "style-src 'self' 'unsafe-inline'; img-src 'self' data: https:; font-src 'self' data:;"
    ),
}


def SecurityHeadersMiddleware(app: Callable, headers: dict[str, str] | None = None) -> Callable:
    """Set security headers on every HTTP response. Raw ASGI."""
    raw = encode_headers(DEFAULT_HEADERS if headers is None else headers)
    return DefaultHeadersMiddleware(app, lambda scope: raw)
