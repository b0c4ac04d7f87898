"""HTTP cache header middleware.

Sets Cache-Control (and Pragma/Expires for no-store responses) from the
request method and path: long-lived for static assets, short for public
catalog reads, never for user-specific, admin/sync, auth or mutating requests.
Headers already set by the endpoint are left alone.
"""

import re
from typing import Callable

from app.middleware.headers import DefaultHeadersMiddleware, RawHeaders, encode_headers

NO_STORE: dict[str, str] = {
    "Cache-Control": "private, no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}
NO_STORE_MUTATION: dict[str, str] = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}

_STATIC_ASSET = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg|ico|woff|woff2|ttf|eot|otf)$", re.IGNORECASE)
_CSS_JS = re.compile(r"\.(css|js)$", re.IGNORECASE)
_HTML = re.compile(r"\.html?$", re.IGNORECASE)

_PUBLIC_CATALOG = ("/items", "/categories", "/subcategories", "/banners", "/faqs", "/settings")
_USER_SPECIFIC = ("/cart", "/wishlist", "/orders", "/user", "/profile", "/address", "/payment")
_AUTH = ("/auth", "/login", "/register")


def _public(max_age: int, *directives: str) -> dict[str, str]:
    return {"Cache-Control": ", ".join(("public", f"max-age={max_age}", *directives))}


def resolve_cache_headers(method: str, path: str) -> dict[str, str]:
    """Return the cache headers for a request.

    Args:
        method: HTTP method (upper case).
        path: Request path without query string.

    Returns:
        Header name to value mapping.
    """
    if method != "GET":
        return dict(NO_STORE_MUTATION)

    path = path.lower()
    if _STATIC_ASSET.search(path):
        return _public(31536000, "immutable")
    if _CSS_JS.search(path):
        return _public(86400, "must-revalidate")

    if path.startswith("/api/"):
        if "/health" in path or "/ping" in path:
            return _public(30)
        if any(segment in path for segment in _PUBLIC_CATALOG):
            return _public(300, "must-revalidate")
        if any(segment in path for segment in _USER_SPECIFIC):
            return dict(NO_STORE)
        if "/admin" in path or "/sync/" in path or any(segment in path for segment in _AUTH):
            return dict(NO_STORE)
        return _public(60, "must-revalidate")

    if _HTML.search(path) or path == "/":
        return _public(300, "must-revalidate")
    return {"Cache-Control": "no-cache, must-revalidate"}


def CacheControlMiddleware(app: Callable) -> Callable:
    """Apply path-based HTTP cache headers to every response. Raw ASGI."""

    def resolve(scope: dict) -> RawHeaders:
        return encode_headers(resolve_cache_headers(scope.get("method", "GET"), scope.get("path", "")))

    return DefaultHeadersMiddleware(app, resolve)
