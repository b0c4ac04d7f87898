"""Application lifespan: tracing setup and the Redis connection for the response cache.

The cache tracker and service are created in create_app() so routes can
resolve them before startup; the lifespan only connects and disconnects.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import Settings, get_settings
from app.infrastructure.cache import CacheAvailability
from app.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


def _start_telemetry(app: FastAPI, settings: Settings) -> None:
    telemetry = TelemetryConfig.from_settings(settings)
    if telemetry.setup_telemetry(
        exporter_type=settings.telemetry_exporter,
        otlp_endpoint=settings.telemetry_otlp_endpoint,
    ) is None:
        return
    telemetry.instrument(app)
    set_telemetry(telemetry)


def _start_cache(availability: CacheAvailability | None, settings: Settings) -> None:
    """Begin connecting to Redis without blocking startup."""
    if availability is None or not settings.redis_enabled:
        logger.info("Response cache disabled (REDIS_ENABLED=false)")
        return
    availability.start()
    logger.info(
        "Connecting to Redis at %s:%s in the background; serving uncached until ready",
        settings.redis_host,
        settings.redis_port,
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: tracing (if enabled), then background Redis connect.

    Shutdown: close Redis, then flush spans.
    """
    settings = get_settings()
    if settings.telemetry_enabled:
        _start_telemetry(app, settings)

    availability: CacheAvailability | None = getattr(app.state, "cache_availability", None)
    _start_cache(availability, settings)

    yield

    if availability is not None:
        await availability.close()

    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()
        set_telemetry(None)
