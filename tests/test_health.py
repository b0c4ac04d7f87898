"""Smoke tests for health endpoints and app wiring."""

from fastapi import FastAPI
from httpx import AsyncClient

from app.infrastructure.cache import CacheService


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/health returns 200 and status healthy."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["status"] == "healthy"


async def test_ping_returns_pong(client: AsyncClient) -> None:
    response = await client.get("/api/health/ping")
    assert response.status_code == 200
    assert response.text == "pong"


async def test_detailed_reports_cache_disabled_until_connected(client: AsyncClient) -> None:
    """Without a Redis connection the app is healthy and reports the cache as off."""
    response = await client.get("/api/health/detailed")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == {"enabled": False, "type": "none"}
    assert "pythonVersion" in data["server"]


async def test_detailed_reports_redis_when_available(
    api_app: FastAPI, client: AsyncClient, cache_service: CacheService
) -> None:
    api_app.state.cache = cache_service
    response = await client.get("/api/health/detailed")
    assert response.json()["cache"] == {"enabled": True, "type": "redis"}


async def test_ready_and_live(client: AsyncClient) -> None:
    ready = await client.get("/api/health/ready")
    assert ready.status_code == 200
    assert ready.json()["ready"] is True

    live = await client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["alive"] is True
    assert live.json()["uptime"] >= 0


async def test_security_headers_present(client: AsyncClient) -> None:
    response = await client.get("/api/health")
    assert response.headers["x-frame-options"] == "SAMEORIGIN"
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"
    assert "default-src 'self'" in response.headers["content-security-policy"]


async def test_health_cache_control(client: AsyncClient) -> None:
    response = await client.get("/api/health")
    assert response.headers["cache-control"] == "public, max-age=30"


async def test_unknown_route_returns_json_404(client: AsyncClient) -> None:
    response = await client.get("/api/nope")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "HTTP_ERROR"
