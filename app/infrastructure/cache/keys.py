"""Cache key and pattern builders. Single place for key format (DRY).

Response keys are CACHE_KEY_PREFIX + the request's original path and query,
so two requests share an entry only if their URLs are identical.
Patterns use Redis glob syntax, where ``*`` matches any substring.
"""

from starlette.requests import Request

from app.core.constants import CACHE_CLEAR_ALL_PATTERN, CACHE_KEY_PREFIX


def request_target(request: Request) -> str:
    """Return the original path plus query string (e.g. ``/api/items?page=2``).

    Uses the raw ASGI path when the server provides one, so the key matches
    the URL as the client sent it and the query keeps its parameter order.
    """
    raw_path = request.scope.get("raw_path")
    # Some servers include the query in raw_path; query_string is authoritative.
    path = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.scope["path"]
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


def response_cache_key(request: Request) -> str:
    """Cache key for the response to this request."""
    return f"{CACHE_KEY_PREFIX}{request_target(request)}"


def fragment_pattern(fragment: str) -> str:
    """Pattern for every cached URL containing fragment (``cache:*items*``).

    An empty fragment means everything under the cache prefix.
    """
    fragment = fragment.strip()
    if not fragment:
        return CACHE_CLEAR_ALL_PATTERN
    return f"{CACHE_KEY_PREFIX}*{fragment}*"


def entity_pattern(entity: str) -> str:
    """Pattern for cached URLs whose path has a segment starting with entity.

    ``entity_pattern("items")`` -> ``cache:*/items*``, which matches
    ``/api/items`` and ``/api/items/42`` but not ``/api/lineitems``.
    """
    entity = entity.strip().strip("/")
    if not entity:
        return CACHE_CLEAR_ALL_PATTERN
    return f"{CACHE_KEY_PREFIX}*/{entity}*"
