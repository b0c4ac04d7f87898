"""Pydantic request/response schemas for the API."""

from app.schemas.health import (
    CacheStatus,
    DetailedHealthResponse,
    HealthResponse,
    LivenessResponse,
    ReadinessResponse,
)
from app.schemas.sync import (
    CacheClearResponse,
    RefreshRequest,
    RefreshResponse,
    SyncPingResponse,
    SyncStatusResponse,
)

__all__ = [
    "CacheClearResponse",
    "CacheStatus",
    "DetailedHealthResponse",
    "HealthResponse",
    "LivenessResponse",
    "ReadinessResponse",
    "RefreshRequest",
    "RefreshResponse",
    "SyncPingResponse",
    "SyncStatusResponse",
]
