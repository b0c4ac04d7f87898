"""Health check endpoints. Used for liveness/readiness probes and uptime checks."""

import platform

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.api.dependencies import CacheDep
from app.core.config import get_settings
from app.core.constants import CACHE_TYPE_NONE, CACHE_TYPE_REDIS
from app.schemas.health import (
    CacheStatus,
    DetailedHealthResponse,
    HealthResponse,
    LivenessResponse,
    ReadinessResponse,
    ServerInfo,
)
from app.shared.utils import python_version, uptime_seconds

router = APIRouter()


def cache_status(cache: CacheDep) -> CacheStatus:
    """Report whether response caching is currently active."""
    enabled = cache.is_available()
    return CacheStatus(enabled=enabled, type=CACHE_TYPE_REDIS if enabled else CACHE_TYPE_NONE)


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple healthy status for liveness."""
    return HealthResponse()


@router.get("/detailed", response_model=DetailedHealthResponse)
def detailed_health_check(cache: CacheDep) -> DetailedHealthResponse:
    """Return server details and response cache state.

    The cache is optional: an unavailable cache is reported, not treated as
    unhealthy.
    """
    settings = get_settings()
    return DetailedHealthResponse(
        server=ServerInfo(
            uptime=uptime_seconds(),
            environment=settings.environment,
            python_version=python_version(),
            platform=platform.system().lower(),
        ),
        cache=cache_status(cache),
    )


@router.get("/ping", response_class=PlainTextResponse)
def ping() -> str:
    """Minimal response for quick health checks."""
    return "pong"


@router.get("/ready", response_model=ReadinessResponse)
def readiness_check() -> ReadinessResponse:
    """Return 200 when the server can accept traffic."""
    return ReadinessResponse()


@router.get("/live", response_model=LivenessResponse)
def liveness_check() -> LivenessResponse:
    """Return 200 while the process is alive."""
    return LivenessResponse(uptime=uptime_seconds())
