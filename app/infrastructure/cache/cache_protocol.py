"""Cache protocol used by the response cache decorators and admin routes (DIP)."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for response cache backends (Redis in production, fakes in tests)."""

    def is_available(self) -> bool:
        """Return True if the backend is reachable right now (no I/O)."""
        ...

    async def get(self, key: str) -> Any:
        """Return the deserialized cached value or None on miss/failure."""
        ...

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL in seconds. Returns False on failure."""
        ...

    async def clear(self, pattern: str = "cache:*") -> int:
        """Delete every key matching the glob pattern; return count removed."""
        ...
