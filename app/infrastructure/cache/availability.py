"""Redis availability tracking for the response cache.

CacheAvailability owns the shared Redis client and the single process-wide
"cache backend reachable" flag. Everything else in the cache layer asks
is_available() before touching Redis; the answer is the cached flag, never
a live probe.

Connection is attempted in the background at startup (start()) so the API
serves uncached traffic while Redis is still connecting. Failed attempts are
retried with a growing delay up to redis_max_retries; after that the cache
stays disabled for the life of the process.
"""

from __future__ import annotations

import asyncio
import logging

import redis.asyncio as redis

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_CONNECT_ERRORS = (redis.RedisError, OSError, asyncio.TimeoutError)


class CacheAvailability:
    """Single source of truth for whether cache operations may be attempted.

    Transitions are driven by connection lifecycle events: connect and ready
    set the flag, error and disconnect clear it. A transition is logged once
    when the state changes, not on every request. Nothing here raises for
    backend failures.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize tracker.

        Args:
            redis_client: Optional client for testing or DI; built from
                settings on first connect otherwise.
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._available = False
        self._gave_up = False
        self._connect_task: asyncio.Task[bool] | None = None

    @property
    def client(self) -> redis.Redis | None:
        """Shared Redis client (None before first connect or after close)."""
        return self.redis

    @property
    def gave_up(self) -> bool:
        """True once retries were exhausted; no further connects are attempted."""
        return self._gave_up

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._available and self.redis is not None

    def _transition(self, available: bool, reason: str) -> None:
        if available == self._available:
            return
        self._available = available
        if available:
            logger.info("Redis cache available (%s)", reason)
        else:
            logger.warning("Redis cache unavailable (%s). Running without cache.", reason)

    def mark_connected(self) -> None:
        self._transition(True, "connected")

    def mark_ready(self) -> None:
        self._transition(True, "ready")

    def mark_error(self, exc: BaseException) -> None:
        self._transition(False, f"error: {exc}")

    def mark_disconnected(self) -> None:
        self._transition(False, "disconnected")

    def retry_delay(self, attempt: int) -> float:
        """Seconds to wait before retry number attempt (1-based)."""
        delay_ms = min(
            attempt * self.settings.redis_retry_step_ms,
            self.settings.redis_retry_max_delay_ms,
        )
        return delay_ms / 1000

    def _build_client(self) -> redis.Redis:
        password = self.settings.redis_password
        return redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=self.settings.redis_connect_timeout,
            socket_timeout=self.settings.redis_socket_timeout,
            socket_keepalive=True,
            max_connections=self.settings.redis_max_connections,
        )

    async def connect(self) -> bool:
        """Connect and PING, retrying with backoff. Returns True when available.

        Each attempt is bounded by redis_connect_timeout. After
        redis_max_retries failed retries the tracker gives up permanently.
        """
        if self._gave_up:
            return False
        attempt = 0
        while True:
            try:
                if self.redis is None:
                    self.redis = self._build_client()
                await asyncio.wait_for(
                    self.redis.ping(),
                    timeout=self.settings.redis_connect_timeout,
                )
            except _CONNECT_ERRORS as e:
                self.mark_error(e)
                attempt += 1
                if attempt > self.settings.redis_max_retries:
                    self._gave_up = True
                    logger.warning(
                        "Redis connection failed after %s retries. Running without cache.",
                        self.settings.redis_max_retries,
                    )
                    return False
                await asyncio.sleep(self.retry_delay(attempt))
                continue
            self.mark_connected()
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
            self.mark_ready()
            return True

    def start(self) -> asyncio.Task[bool]:
        """Schedule connect() in the background and return immediately."""
        if self._connect_task is None or self._connect_task.done():
            self._connect_task = asyncio.create_task(self.connect())
        return self._connect_task

    def handle_connection_error(self, exc: BaseException) -> None:
        """Mark unavailable after a runtime connection failure and reconnect in background."""
        self.mark_error(exc)
        if not self._gave_up:
            self.start()

    async def wait_connected(self) -> bool:
        """Await the pending background connect, if any. Used by tests and startup probes."""
        if self._connect_task is None:
            return self.is_available()
        return await self._connect_task

    async def close(self) -> None:
        """Stop connecting and close the Redis client. Call on app shutdown."""
        if self._connect_task is not None and not self._connect_task.done():
            self._connect_task.cancel()
            try:
                await self._connect_task
            except asyncio.CancelledError:
                pass
        self._connect_task = None
        if self.redis is not None:
            try:
                await self.redis.aclose()
                logger.info("Redis connection closed")
            except _CONNECT_ERRORS as e:
                logger.warning("Error closing Redis connection: %s", e)
            self.redis = None
        self.mark_disconnected()
