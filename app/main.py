"""FastAPI application entry point.

Wiring only: logging, the response cache (tracker + service on app.state),
rate limiting, exception handlers, middleware and routers. Settings are
read inside create_app() so tests can set env and clear get_settings
before building an app.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.router import api_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.core.limiter import limiter
from app.infrastructure.cache import CacheAvailability, CacheService
from app.middleware import (
    CacheControlMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    TimeoutMiddleware,
)
from app.shared.telemetry import setup_logging


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    # Last added runs outermost: timeout, logging, security headers, cache headers, CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Cache"],
    )
    app.add_middleware(CacheControlMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)


def create_app() -> FastAPI:
    """Build the storefront API application."""
    settings = get_settings()
    setup_logging(settings)
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    # One tracker per app owns the Redis client; the lifespan connects it.
    availability = CacheAvailability(settings=settings)
    app.state.cache_availability = availability
    app.state.cache = CacheService(availability)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_exception_handlers(app)

    _add_middleware(app, settings)
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
