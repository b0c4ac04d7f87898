"""Sync/admin API schemas: cache clearing, data refresh and sync status.

Field names serialize as camelCase (e.g. itemsCleared) for the admin UI.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.health import CacheStatus
from app.shared.utils import utc_now_iso


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CacheClearResponse(_CamelModel):
    """Response for POST /sync/cache/clear and /sync/cache/clear/{pattern}."""

    success: bool = True
    message: str
    pattern: str | None = Field(default=None, description="Glob pattern that was cleared")
    items_cleared: int = Field(..., ge=0, description="Number of cache entries removed")


class RefreshRequest(_CamelModel):
    """Request body for POST /sync/refresh. No entities means refresh everything."""

    entities: list[str] | None = Field(
        default=None,
        description="Entities to refresh, e.g. ['items', 'categories']",
    )


class RefreshResponse(_CamelModel):
    """Response for POST /sync/refresh: entries cleared per entity (or under 'all')."""

    success: bool = True
    message: str = "Data refresh triggered successfully"
    results: dict[str, int]


class SyncServerInfo(_CamelModel):
    uptime: float
    python_version: str
    environment: str


class SyncStatus(_CamelModel):
    timestamp: str = Field(default_factory=utc_now_iso)
    cache: CacheStatus
    server: SyncServerInfo


class SyncStatusResponse(_CamelModel):
    """Response for GET /sync/status."""

    success: bool = True
    status: SyncStatus


class SyncPingResponse(_CamelModel):
    """Response for GET /sync/ping."""

    success: bool = True
    message: str = "Sync service is running"
    timestamp: str = Field(default_factory=utc_now_iso)
