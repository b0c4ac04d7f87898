"""Settings for the storefront API, read from the environment and ``.env``.

Everything has a default so the API boots with no configuration at all;
without a reachable Redis it simply serves uncached responses.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings (env var names are the upper-cased field names)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: str = "storefront-api"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    log_level: str | None = None

    # Comma-separated list of storefront/admin UI origins.
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"
    request_timeout_seconds: int = 60

    # Sync/admin routes: token header check plus a per-IP SlowAPI limit.
    admin_token: SecretStr | None = None
    admin_token_header: str = "X-Admin-Token"
    rate_limit_admin: str = "100/15minutes"

    # Response cache backend. Connect is retried redis_max_retries times with
    # a delay of min(attempt * step, max) ms, then the cache stays off.
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10
    redis_connect_timeout: float = 5.0
    redis_socket_timeout: float = 1.0
    redis_max_retries: int = 3
    redis_retry_step_ms: int = 100
    redis_retry_max_delay_ms: int = 3000

    # Tracing (OpenTelemetry). Exporter: console | otlp | none.
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0

    @model_validator(mode="after")
    def validate_cache_settings(self) -> "Settings":
        if not 0 < self.redis_port < 65536:
            raise ValueError(f"REDIS_PORT out of range: {self.redis_port}")
        if self.redis_max_retries < 0:
            raise ValueError(f"REDIS_MAX_RETRIES must be >= 0, got: {self.redis_max_retries}")
        if self.redis_connect_timeout <= 0:
            raise ValueError("REDIS_CONNECT_TIMEOUT must be positive")
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0 and 1")
        return self


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings, built on first use.

    Tests change env vars and then call get_settings.cache_clear().
    """
    return Settings()
