"""Pytest configuration and fixtures for the storefront API.

Redis is replaced by FakeRedis, an in-memory stand-in implementing the
subset of redis.asyncio.Redis the cache layer calls (ping, get, setex,
scan_iter, pipeline/unlink, aclose). Set fake.fail_with to an exception to
simulate a broken backend.
"""

import asyncio
import fnmatch
from collections.abc import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings, get_settings
from app.infrastructure.cache import CacheAvailability, CacheService

TEST_ADMIN_TOKEN = "test-admin-token"


class _FakePipeline:
    def __init__(self, redis: "FakeRedis") -> None:
        self.redis = redis
        self.ops: list[tuple[str, ...]] = []

    async def __aenter__(self) -> "_FakePipeline":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    def unlink(self, *keys: str) -> "_FakePipeline":
        self.ops.append(keys)
        return self

    async def execute(self) -> list[int]:
        self.redis._check()
        results = [
            sum(1 for key in keys if self.redis.store.pop(key, None) is not None)
            for keys in self.ops
        ]
        self.ops = []
        return results


class FakeRedis:
    """In-memory async Redis double with glob matching via fnmatch."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail_with: Exception | None = None
        self.ping_delay: float = 0.0
        self.ping_calls = 0
        self.closed = False

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def ping(self) -> bool:
        self.ping_calls += 1
        if self.ping_delay:
            await asyncio.sleep(self.ping_delay)
        self._check()
        return True

    async def get(self, key: str) -> str | None:
        self._check()
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
        self._check()
        for key in list(self.store):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    def pipeline(self, transaction: bool = True) -> _FakePipeline:
        return _FakePipeline(self)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def test_settings() -> Settings:
    """Settings with millisecond retry delays so reconnect paths finish quickly."""
    return Settings(
        redis_retry_step_ms=1,
        redis_retry_max_delay_ms=5,
        redis_max_retries=3,
        redis_connect_timeout=0.5,
    )


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
async def availability(
    fake_redis: FakeRedis, test_settings: Settings
) -> AsyncIterator[CacheAvailability]:
    """Tracker connected to FakeRedis."""
    tracker = CacheAvailability(redis_client=fake_redis, settings=test_settings)
    assert await tracker.connect() is True
    yield tracker
    await tracker.close()


@pytest.fixture
def cache_service(availability: CacheAvailability) -> CacheService:
    return CacheService(availability)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Token": TEST_ADMIN_TOKEN}


@pytest.fixture
def api_app(monkeypatch: pytest.MonkeyPatch) -> Iterator[FastAPI]:
    """Full application with a known admin token. Cache starts unavailable (lifespan not run)."""
    monkeypatch.setenv("ADMIN_TOKEN", TEST_ADMIN_TOKEN)
    get_settings.cache_clear()
    from app.main import create_app

    yield create_app()
    get_settings.cache_clear()


@pytest.fixture
async def client(api_app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
