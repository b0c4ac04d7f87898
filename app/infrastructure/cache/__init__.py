"""Cache: Redis availability tracking, response cache service, and route decorators.

Used by read routes (cache_response), mutation routes (invalidate_cache) and
the sync/admin routes (CacheService.clear). Key format is in keys.py (DRY).
"""

from app.infrastructure.cache.availability import CacheAvailability
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import (
    entity_pattern,
    fragment_pattern,
    response_cache_key,
)
from app.infrastructure.cache.redis_cache import CacheService
from app.infrastructure.cache.response_cache import (
    cache_from_request,
    cache_response,
    clear_patterns,
    invalidate_cache,
)

__all__ = [
    "CacheAvailability",
    "CacheProtocol",
    "CacheService",
    "cache_from_request",
    "cache_response",
    "clear_patterns",
    "entity_pattern",
    "fragment_pattern",
    "invalidate_cache",
    "response_cache_key",
]
