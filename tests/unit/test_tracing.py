"""Tracing helpers behave as plain pass-through when telemetry is off."""

import pytest

from app.shared.telemetry import add_span_attributes, get_trace_id, traced


async def test_traced_returns_result_and_propagates_errors() -> None:
    @traced("cache.clear", arguments=("pattern",))
    async def clear(pattern: str = "cache:*") -> int:
        if pattern == "boom":
            raise RuntimeError("scan failed")
        return 3

    assert await clear() == 3
    assert await clear(pattern="cache:*items*") == 3
    with pytest.raises(RuntimeError):
        await clear("boom")


def test_traced_rejects_sync_functions() -> None:
    with pytest.raises(TypeError):

        @traced("cache.get")
        def get(key: str) -> None:
            return None


def test_helpers_without_active_span() -> None:
    add_span_attributes(**{"cache.hit": True})
    assert get_trace_id() is None
