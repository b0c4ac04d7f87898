"""Redis-backed response cache service.

Provides best-effort async get/set and glob-pattern invalidation for cached
JSON response bodies. Every operation checks CacheAvailability right before
touching Redis and degrades to a no-op when the backend is down; backend
errors are logged and never raised to callers.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from app.core.constants import (
    CACHE_CLEAR_ALL_PATTERN,
    CACHE_DEFAULT_TTL,
    CACHE_DELETE_CHUNK_SIZE,
)
from app.infrastructure.cache.availability import CacheAvailability
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (redis.ConnectionError, redis.TimeoutError)


class CacheService:
    """Async Redis cache for serialized response bodies.

    Shares the Redis client owned by a CacheAvailability instance, so the
    availability flag and the connection have one owner per process.
    Connection failures seen here are reported back to the tracker, which
    flips the flag and reconnects in the background.
    """

    def __init__(self, availability: CacheAvailability) -> None:
        """Initialize cache service.

        Args:
            availability: Tracker owning the Redis client and availability flag.
        """
        self.availability = availability

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self.availability.is_available()

    def _client(self) -> redis.Redis | None:
        if not self.availability.is_available():
            return None
        return self.availability.client

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable.

        A stored value that is not valid JSON counts as a miss.

        Args:
            key: Cache key (use app.infrastructure.cache.keys builders).

        Returns:
            Cached value or None.
        """
        client = self._client()
        if client is None:
            return None
        try:
            value = await client.get(key)
        except _CONNECTION_ERRORS as e:
            self.availability.handle_connection_error(e)
            logger.warning("Cache get unavailable for key %s: %s", key, e)
            return None
        except redis.RedisError as e:
            logger.warning("Cache get error for key %s: %s", key, e)
            return None
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            data = json.loads(value)
        except (TypeError, ValueError) as e:
            logger.warning("Malformed cached value for key %s, treating as miss: %s", key, e)
            return None
        logger.debug("Cache HIT: %s", key)
        return data

    async def set(self, key: str, value: Any, ttl: int = CACHE_DEFAULT_TTL) -> bool:
        """Store value with TTL. Returns True on success.

        Args:
            key: Cache key.
            value: Value to cache (JSON-serializable).
            ttl: Time-to-live in seconds (default 300).

        Returns:
            True if stored, False otherwise.
        """
        client = self._client()
        if client is None:
            return False
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning("Cache set skipped for key %s (not JSON-serializable): %s", key, e)
            return False
        try:
            await client.setex(key, ttl, serialized)
        except _CONNECTION_ERRORS as e:
            self.availability.handle_connection_error(e)
            logger.warning("Failed to cache response for key %s: %s", key, e)
            return False
        except redis.RedisError as e:
            logger.warning("Failed to cache response for key %s: %s", key, e)
            return False
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def _unlink(self, client: redis.Redis, keys: list[str]) -> int:
        async with client.pipeline(transaction=False) as pipe:
            pipe.unlink(*keys)
            results = await pipe.execute()
        return sum(int(r or 0) for r in results)

    @traced("cache.clear", arguments=("pattern",))
    async def clear(self, pattern: str = CACHE_CLEAR_ALL_PATTERN) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking).

        Uses scan_iter to avoid KEYS blocking the server; collects keys in
        chunks and UNLINKs each chunk in one round-trip.

        Args:
            pattern: Redis glob pattern (e.g. ``cache:*items*``).

        Returns:
            Number of keys deleted; 0 when unavailable or on error.
        """
        client = self._client()
        if client is None:
            logger.debug("Redis not available, skipping cache clear for %s", pattern)
            return 0
        deleted = 0
        try:
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= CACHE_DELETE_CHUNK_SIZE:
                    deleted += await self._unlink(client, chunk)
                    chunk = []
            if chunk:
                deleted += await self._unlink(client, chunk)
        except _CONNECTION_ERRORS as e:
            self.availability.handle_connection_error(e)
            logger.warning("Error clearing cache for pattern %s: %s", pattern, e)
            return 0
        except redis.RedisError as e:
            logger.warning("Error clearing cache for pattern %s: %s", pattern, e)
            return 0
        if deleted:
            logger.info("Cleared %s cache entries matching pattern: %s", deleted, pattern)
        else:
            logger.debug("No cache keys found matching pattern: %s", pattern)
        return deleted
