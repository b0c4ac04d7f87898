"""Core constants: response cache key format and shared literal values.

Single source of truth for cache key structure. Used by
app.infrastructure.cache.keys and the sync/admin routes.
"""

# Every cached response lives under this prefix, followed by path + query.
CACHE_KEY_PREFIX = "cache:"
CACHE_CLEAR_ALL_PATTERN = f"{CACHE_KEY_PREFIX}*"

# Seconds
CACHE_DEFAULT_TTL = 300

# SCAN/UNLINK batch size for pattern invalidation
CACHE_DELETE_CHUNK_SIZE = 500

CACHE_TYPE_REDIS = "redis"
CACHE_TYPE_NONE = "none"

# Response header telling clients whether the body came from the cache
CACHE_STATUS_HEADER = "X-Cache"
