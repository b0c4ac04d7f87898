"""Application exceptions for the storefront API.

Raised by the API and cache layers, rendered as JSON error bodies by
app.core.exception_handlers. Backend (Redis) failures are never raised as
these: the cache degrades to pass-through instead.
"""

from typing import Any


class StorefrontException(Exception):
    """Base exception for storefront errors that map to an HTTP response.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable code (``error`` in the JSON body).
        details: Extra context (e.g. offending field or setting).
        status_code: HTTP status used when the exception reaches a handler.
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize as ``{"success": false, "error", "message"[, "details"]}``."""
        body: dict[str, Any] = {
            "success": False,
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(StorefrontException):
    """Raised when a request value is syntactically valid but unusable (e.g. blank pattern)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", {"field": field} if field else None)


class AuthorizationException(StorefrontException):
    """Raised when an admin route is called without a valid admin token."""

    status_code = 403

    def __init__(self, message: str = "Admin access required") -> None:
        super().__init__(message, "AUTHORIZATION_ERROR")


class CacheConfigurationError(StorefrontException, ValueError):
    """A cache decorator was declared with invalid arguments (non-positive TTL, empty pattern).

    Raised at import time when routes are decorated, so it surfaces as a
    startup failure rather than a request error.
    """

    status_code = 500

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message, "CACHE_CONFIGURATION_ERROR", {"setting": setting} if setting else None)
