"""CacheAvailability: connect/retry policy, lifecycle transitions, background reconnect."""

import logging

import pytest
import redis.asyncio as redis

from app.core.config import Settings
from app.infrastructure.cache import CacheAvailability


async def test_connect_marks_available(fake_redis, test_settings: Settings) -> None:
    """A successful PING makes the cache available."""
    tracker = CacheAvailability(redis_client=fake_redis, settings=test_settings)
    assert tracker.is_available() is False
    assert await tracker.connect() is True
    assert tracker.is_available() is True
    assert fake_redis.ping_calls == 1


async def test_connect_gives_up_after_max_retries(fake_redis, test_settings: Settings) -> None:
    """One initial attempt plus redis_max_retries retries, then permanently unavailable."""
    fake_redis.fail_with = redis.ConnectionError("connection refused")
    tracker = CacheAvailability(redis_client=fake_redis, settings=test_settings)

    assert await tracker.connect() is False
    assert tracker.is_available() is False
    assert tracker.gave_up is True
    assert fake_redis.ping_calls == test_settings.redis_max_retries + 1

    # Gave up for the life of the process: no further attempts even if Redis comes back.
    fake_redis.fail_with = None
    assert await tracker.connect() is False
    assert fake_redis.ping_calls == test_settings.redis_max_retries + 1


async def test_connect_recovers_on_retry(fake_redis, test_settings: Settings) -> None:
    """A transient failure followed by a good PING ends available."""
    tracker = CacheAvailability(redis_client=fake_redis, settings=test_settings)
    fake_redis.fail_with = redis.ConnectionError("not yet")

    original_ping = fake_redis.ping

    async def flaky_ping() -> bool:
        try:
            return await original_ping()
        finally:
            fake_redis.fail_with = None

    fake_redis.ping = flaky_ping
    assert await tracker.connect() is True
    assert tracker.is_available() is True
    assert fake_redis.ping_calls == 2


async def test_connect_timeout_counts_as_failure(fake_redis) -> None:
    """A PING slower than redis_connect_timeout is a failed attempt."""
    settings = Settings(redis_connect_timeout=0.01, redis_max_retries=0)
    fake_redis.ping_delay = 0.5
    tracker = CacheAvailability(redis_client=fake_redis, settings=settings)
    assert await tracker.connect() is False
    assert tracker.gave_up is True


def test_retry_delay_grows_and_is_capped() -> None:
    """Delay is attempt * 100ms, capped at 3s (default settings)."""
    tracker = CacheAvailability(settings=Settings())
    assert tracker.retry_delay(1) == pytest.approx(0.1)
    assert tracker.retry_delay(3) == pytest.approx(0.3)
    assert tracker.retry_delay(100) == pytest.approx(3.0)


async def test_start_does_not_block(fake_redis, test_settings: Settings) -> None:
    """start() returns a task; the cache is unavailable until it completes."""
    tracker = CacheAvailability(redis_client=fake_redis, settings=test_settings)
    task = tracker.start()
    assert tracker.is_available() is False
    assert await task is True
    assert tracker.is_available() is True
    await tracker.close()


async def test_transitions_log_once_per_change(
    availability: CacheAvailability, caplog: pytest.LogCaptureFixture
) -> None:
    """Repeated error events log a single warning until the state changes again."""
    with caplog.at_level(logging.WARNING, logger="app.infrastructure.cache.availability"):
        availability.mark_error(redis.ConnectionError("boom"))
        availability.mark_error(redis.ConnectionError("boom again"))
        availability.mark_disconnected()
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert availability.is_available() is False

    availability.mark_ready()
    assert availability.is_available() is True


async def test_handle_connection_error_reconnects_in_background(
    availability: CacheAvailability,
) -> None:
    """A runtime connection error flips the flag and a background reconnect restores it."""
    availability.handle_connection_error(redis.ConnectionError("reset by peer"))
    assert availability.is_available() is False
    assert await availability.wait_connected() is True
    assert availability.is_available() is True


async def test_close_disconnects(fake_redis, availability: CacheAvailability) -> None:
    """close() quits the client and reports unavailable."""
    await availability.close()
    assert fake_redis.closed is True
    assert availability.client is None
    assert availability.is_available() is False


async def test_close_swallows_client_errors(fake_redis, availability: CacheAvailability) -> None:
    """Errors while quitting are logged, not raised."""

    async def broken_close() -> None:
        raise redis.ConnectionError("already gone")

    fake_redis.aclose = broken_close
    await availability.close()
    assert availability.is_available() is False
