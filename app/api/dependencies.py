"""Request dependencies (composition root) for the response cache and admin guard."""

from __future__ import annotations

import secrets
from typing import Annotated

from fastapi import Depends, Request

from app.core.config import get_settings
from app.domain.exceptions import AuthorizationException
from app.infrastructure.cache import CacheProtocol, cache_from_request


def get_cache_service(request: Request) -> CacheProtocol:
    """Process-wide response cache (created in create_app, connected in lifespan)."""
    cache = cache_from_request(request)
    if cache is None:
        raise RuntimeError("Response cache not wired: app.state.cache is missing")
    return cache


def require_admin(request: Request) -> None:
    """Reject callers without the configured admin token.

    The token is read from the header named by ADMIN_TOKEN_HEADER
    (X-Admin-Token by default). When ADMIN_TOKEN is unset every call is
    rejected, so admin routes are closed by default.
    """
    settings = get_settings()
    expected = settings.admin_token.get_secret_value() if settings.admin_token else ""
    provided = request.headers.get(settings.admin_token_header, "")
    if not expected or not secrets.compare_digest(provided.encode(), expected.encode()):
        raise AuthorizationException()


CacheDep = Annotated[CacheProtocol, Depends(get_cache_service)]
