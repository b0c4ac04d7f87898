"""Logging setup: one stdout handler for the app, quiet third-party loggers."""

import logging
import sys

from app.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Client libraries whose INFO output repeats what the cache layer already logs.
_QUIET_LOGGERS = ("redis", "httpx", "opentelemetry")


def resolve_log_level(settings: Settings) -> int:
    """LOG_LEVEL when set (e.g. "warning"), else DEBUG in debug mode and INFO otherwise."""
    if settings.log_level:
        level = logging.getLevelName(settings.log_level.upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if settings.debug else logging.INFO


def setup_logging(settings: Settings | None = None) -> None:
    """Configure the root logger (no-op for the handler if one is already installed)."""
    level = resolve_log_level(settings or get_settings())
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    third_party_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)
