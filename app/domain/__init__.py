"""Domain layer: application exceptions.

No dependencies on infrastructure or presentation. Used by the cache layer
and the API layer.
"""

from app.domain.exceptions import (
    AuthorizationException,
    CacheConfigurationError,
    StorefrontException,
    ValidationException,
)

__all__ = [
    "AuthorizationException",
    "CacheConfigurationError",
    "StorefrontException",
    "ValidationException",
]
