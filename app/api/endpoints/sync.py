"""Sync endpoints: admin cache invalidation, data refresh and sync status.

Used by the admin UI after it edits catalog data, so storefront readers stop
seeing cached responses for the changed resources. All routes except /ping
require the admin token and are rate limited per client IP.
"""

import logging

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import CacheDep, require_admin
from app.api.endpoints.health import cache_status
from app.core.config import get_settings
from app.core.constants import CACHE_CLEAR_ALL_PATTERN
from app.core.limiter import limit_admin
from app.domain.exceptions import ValidationException
from app.infrastructure.cache import clear_patterns, entity_pattern, fragment_pattern
from app.schemas.sync import (
    CacheClearResponse,
    RefreshRequest,
    RefreshResponse,
    SyncPingResponse,
    SyncServerInfo,
    SyncStatus,
    SyncStatusResponse,
)
from app.shared.utils import python_version, uptime_seconds

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
@limit_admin
async def clear_all_cache(request: Request, cache: CacheDep) -> CacheClearResponse:
    """Clear every cached response."""
    cleared = await cache.clear(CACHE_CLEAR_ALL_PATTERN)
    logger.info("Cache cleared by admin: %s entries", cleared)
    return CacheClearResponse(message="Cache cleared successfully", items_cleared=cleared)


@router.post(
    "/cache/clear/{pattern}",
    response_model=CacheClearResponse,
    dependencies=[Depends(require_admin)],
)
@limit_admin
async def clear_cache_pattern(
    request: Request, pattern: str, cache: CacheDep
) -> CacheClearResponse:
    """Clear cached responses whose URL contains pattern (cleared as ``cache:*{pattern}*``)."""
    if not pattern.strip():
        raise ValidationException("Cache pattern must not be blank", field="pattern")
    cache_pattern = fragment_pattern(pattern)
    cleared = await cache.clear(cache_pattern)
    logger.info("Cache pattern %s cleared by admin: %s entries", cache_pattern, cleared)
    return CacheClearResponse(
        message=f"Cache cleared for pattern: {pattern}",
        pattern=cache_pattern,
        items_cleared=cleared,
    )


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    dependencies=[Depends(require_admin)],
)
@limit_admin
async def refresh_data(
    request: Request, cache: CacheDep, payload: RefreshRequest | None = None
) -> RefreshResponse:
    """Clear cached responses for the given entities, or everything when none are given."""
    entities = payload.entities if payload else None
    if entities:
        by_pattern = await clear_patterns(cache, [entity_pattern(e) for e in entities])
        results = {entity: by_pattern[entity_pattern(entity)] for entity in entities}
    else:
        results = {"all": await cache.clear(CACHE_CLEAR_ALL_PATTERN)}
    logger.info("Data refresh triggered by admin: %s", results)
    return RefreshResponse(results=results)


@router.get(
    "/status",
    response_model=SyncStatusResponse,
    dependencies=[Depends(require_admin)],
)
@limit_admin
async def sync_status(request: Request, cache: CacheDep) -> SyncStatusResponse:
    """Report cache state and basic server info."""
    return SyncStatusResponse(
        status=SyncStatus(
            cache=cache_status(cache),
            server=SyncServerInfo(
                uptime=uptime_seconds(),
                python_version=python_version(),
                environment=get_settings().environment,
            ),
        )
    )


@router.get("/ping", response_model=SyncPingResponse)
def sync_ping() -> SyncPingResponse:
    """Public liveness check for the sync service."""
    return SyncPingResponse()
