"""Path-based HTTP cache header rules."""

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from app.middleware import CacheControlMiddleware
from app.middleware.cache_control import resolve_cache_headers


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/images/logo.PNG", "public, max-age=31536000, immutable"),
        ("/static/app.js", "public, max-age=86400, must-revalidate"),
        ("/api/health/detailed", "public, max-age=30"),
        ("/api/sync/ping", "public, max-age=30"),
        ("/api/items?page=2", "public, max-age=300, must-revalidate"),
        ("/api/subcategories/4", "public, max-age=300, must-revalidate"),
        ("/api/cart", "private, no-cache, no-store, must-revalidate"),
        ("/api/orders/17", "private, no-cache, no-store, must-revalidate"),
        ("/api/admin/reports", "private, no-cache, no-store, must-revalidate"),
        ("/api/sync/status", "private, no-cache, no-store, must-revalidate"),
        ("/api/auth/session", "private, no-cache, no-store, must-revalidate"),
        ("/api/coupons", "public, max-age=60, must-revalidate"),
        ("/", "public, max-age=300, must-revalidate"),
        ("/about.html", "public, max-age=300, must-revalidate"),
        ("/robots.txt", "no-cache, must-revalidate"),
    ],
)
def test_get_rules(path: str, expected: str) -> None:
    assert resolve_cache_headers("GET", path)["Cache-Control"] == expected


def test_no_store_adds_pragma_and_expires() -> None:
    headers = resolve_cache_headers("GET", "/api/wishlist")
    assert headers["Pragma"] == "no-cache"
    assert headers["Expires"] == "0"


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE"])
def test_mutations_are_never_stored(method: str) -> None:
    headers = resolve_cache_headers(method, "/api/items")
    assert headers["Cache-Control"] == "no-store, no-cache, must-revalidate, private"


async def test_middleware_keeps_endpoint_header() -> None:
    app = FastAPI()

    @app.get("/api/items")
    async def items() -> JSONResponse:
        return JSONResponse([], headers={"Cache-Control": "max-age=5"})

    @app.get("/api/categories")
    async def categories() -> list:
        return []

    app.add_middleware(CacheControlMiddleware)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        assert (await ac.get("/api/items")).headers["cache-control"] == "max-age=5"
        response = await ac.get("/api/categories")
        assert response.headers["cache-control"] == "public, max-age=300, must-revalidate"
