"""API router aggregation.

Includes all endpoint modules with consistent prefix and tags. Mounted
under /api in app.main. This service ships only the health and sync
(cache admin) routers; storefront resource routers (items, categories,
orders, ...) are included here the same way and wrap their handlers with
the decorators from app.infrastructure.cache::

    @router.get("")
    @cache_response(ttl=300)
    async def list_items(page: int = 1) -> dict: ...

    @router.post("", status_code=201)
    @invalidate_cache(fragment_pattern("items"))
    async def create_item(payload: ItemIn) -> dict: ...

    api_router.include_router(items.router, prefix="/items", tags=["items"])
"""

from fastapi import APIRouter

from app.api.endpoints import health, sync

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(sync.router, prefix="/sync", tags=["sync"])
