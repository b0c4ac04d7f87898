"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Limits are per client IP.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def _admin_limit() -> str:
    """Admin/sync limit string, read from settings at request time."""
    return get_settings().rate_limit_admin


limit_admin = limiter.limit(_admin_limit)
