"""Tests for domain exceptions (error_code, message, details) and settings validation."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.domain.exceptions import (
    AuthorizationException,
    CacheConfigurationError,
    StorefrontException,
    ValidationException,
)


def test_storefront_exception_default_error_code() -> None:
    """Base StorefrontException uses class name as error_code when not provided."""
    exc = StorefrontException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "StorefrontException"
    assert exc.details == {}


def test_to_dict_omits_empty_details() -> None:
    assert AuthorizationException().to_dict() == {
        "success": False,
        "error": "AUTHORIZATION_ERROR",
        "message": "Admin access required",
    }
    assert AuthorizationException.status_code == 403


def test_validation_exception_carries_field() -> None:
    exc = ValidationException("Cache pattern must not be blank", field="pattern")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.to_dict()["details"] == {"field": "pattern"}


def test_cache_configuration_error_is_value_error() -> None:
    """Misconfigured decorators fail like any other bad argument."""
    exc = CacheConfigurationError("ttl must be positive", "ttl")
    assert isinstance(exc, ValueError)
    assert exc.error_code == "CACHE_CONFIGURATION_ERROR"
    assert exc.details == {"setting": "ttl"}


def test_settings_defaults() -> None:
    settings = Settings()
    assert settings.redis_connect_timeout == 5.0
    assert settings.redis_max_retries == 3
    assert settings.redis_retry_step_ms == 100
    assert settings.redis_retry_max_delay_ms == 3000
    assert settings.admin_token_header == "X-Admin-Token"


@pytest.mark.parametrize(
    "overrides",
    [
        {"redis_port": 0},
        {"redis_port": 70000},
        {"redis_max_retries": -1},
        {"redis_connect_timeout": 0},
    ],
)
def test_settings_reject_bad_cache_values(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)
