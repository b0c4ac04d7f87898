"""Read-through response caching and post-mutation invalidation for routes.

cache_response(ttl) wraps a read endpoint: a GET whose URL is already cached
is answered from Redis without running the endpoint; otherwise the endpoint
runs and a 200 JSON body is stored after the response is sent.

invalidate_cache(*patterns) wraps a mutation endpoint: once the endpoint has
produced a 2xx response, every pattern is cleared (awaited before the
response is returned). Failed mutations clear nothing.

Both decorators resolve the cache from request.app.state.cache and fall
back to plain pass-through when it is missing or unavailable. Cache faults
are logged and never change the response the client gets.

Usage::

    @router.get("/items")
    @cache_response(ttl=300)
    async def list_items() -> dict: ...

    @router.post("/items", status_code=201)
    @invalidate_cache(fragment_pattern("items"))
    async def create_item(payload: ItemIn) -> dict: ...
"""

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from functools import wraps
from typing import Any

from fastapi import BackgroundTasks
from fastapi.encoders import jsonable_encoder
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.constants import (
    CACHE_CLEAR_ALL_PATTERN,
    CACHE_DEFAULT_TTL,
    CACHE_STATUS_HEADER,
)
from app.domain.exceptions import CacheConfigurationError
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import response_cache_key
from app.shared.telemetry.tracing import add_span_attributes

logger = logging.getLogger(__name__)

READ_METHODS = frozenset({"GET"})
MUTATION_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

# Framework parameters every wrapped endpoint receives, with the name used
# when the endpoint does not declare one itself. Order matches _RouteCall.
_FRAMEWORK_PARAMS: tuple[tuple[type, str], ...] = (
    (Request, "_cache_request"),
    (Response, "_cache_response"),
    (BackgroundTasks, "_cache_background_tasks"),
)


@dataclass
class _RouteCall:
    """Per-request objects FastAPI hands the endpoint.

    response is the sub-response FastAPI merges into plain return values
    (status code, headers, cookies); background_tasks run after the
    response is sent when the returned response carries none of its own.
    """

    request: Request
    response: Response
    background_tasks: BackgroundTasks

    def status_code(self, result: Any) -> int:
        """Status the client will get for result."""
        if isinstance(result, Response):
            return result.status_code
        if self.response.status_code:
            return self.response.status_code
        route = self.request.scope.get("route")
        return getattr(route, "status_code", None) or 200


def cache_from_request(request: Request) -> CacheProtocol | None:
    """Return the process cache service stored on app.state (None if not wired)."""
    return getattr(request.app.state, "cache", None)


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _with_framework_params(
    func: Callable[..., Any],
) -> tuple[inspect.Signature, list[tuple[str, bool]]]:
    """Return the endpoint signature plus (param name, injected?) per framework param.

    Reuses parameters the endpoint already annotates as Request, Response or
    BackgroundTasks; appends keyword-only ones for the rest so FastAPI
    passes them.
    """
    sig = inspect.signature(func, eval_str=True)
    params = list(sig.parameters.values())
    resolved: list[tuple[str, bool]] = []
    for annotation, default_name in _FRAMEWORK_PARAMS:
        existing = next(
            (
                p.name
                for p in params
                if inspect.isclass(p.annotation) and issubclass(p.annotation, annotation)
            ),
            None,
        )
        if existing is not None:
            resolved.append((existing, False))
            continue
        extra = inspect.Parameter(default_name, inspect.Parameter.KEYWORD_ONLY, annotation=annotation)
        # Keyword-only params must precede **kwargs.
        if params and params[-1].kind is inspect.Parameter.VAR_KEYWORD:
            params.insert(len(params) - 1, extra)
        else:
            params.append(extra)
        resolved.append((default_name, True))
    return sig.replace(parameters=params), resolved


def _endpoint_wrapper(
    func: Callable[..., Any],
    around: Callable[[_RouteCall, Callable[[], Awaitable[Any]]], Awaitable[Any]],
) -> Callable[..., Any]:
    """Build an async endpoint that hands the route call and the inner call to around()."""
    sig, resolved = _with_framework_params(func)
    is_async = inspect.iscoroutinefunction(func)

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        call = _RouteCall(
            *(kwargs.pop(name) if injected else kwargs[name] for name, injected in resolved)
        )

        async def call_endpoint() -> Any:
            if is_async:
                return await func(*args, **kwargs)
            return await run_in_threadpool(func, *args, **kwargs)

        return await around(call, call_endpoint)

    wrapper.__signature__ = sig  # type: ignore[attr-defined]
    return wrapper


def _json_body(result: Any) -> tuple[bool, Any]:
    """Return (is_json, body) for an endpoint result.

    Plain return values are JSON bodies. Responses count as JSON only when
    rendered with an application/json media type and a fully buffered body.
    """
    if not isinstance(result, Response):
        return True, jsonable_encoder(result)
    content_type = result.headers.get("content-type", "")
    if "application/json" not in content_type or not hasattr(result, "body"):
        return False, None
    try:
        return True, json.loads(result.body)
    except (TypeError, ValueError):
        return False, None


def _schedule_write(response: Response, call: _RouteCall, task: BackgroundTask) -> None:
    """Run task after the response is sent, alongside the endpoint's own tasks.

    FastAPI attaches the request's BackgroundTasks only to a response with
    no background of its own, so the write joins that list when it will be
    attached and is chained onto the response's background otherwise.
    """
    if response.background is None:
        call.background_tasks.add_task(task.func, *task.args, **task.kwargs)
        return
    response.background = BackgroundTasks(tasks=[response.background, task])


async def _store_best_effort(cache: CacheProtocol, key: str, body: Any, ttl: int) -> None:
    """Write a cache entry; log and swallow any failure."""
    try:
        await cache.set(key, body, ttl=ttl)
    except Exception as e:
        logger.warning("Failed to cache response for %s: %s", key, e)


async def _lookup_best_effort(cache: CacheProtocol, key: str) -> Any | None:
    """Read a cache entry; any failure is treated as a miss."""
    try:
        return await cache.get(key)
    except Exception as e:
        logger.warning("Cache lookup error for %s, treating as miss: %s", key, e)
        return None


def cache_response(ttl: int = CACHE_DEFAULT_TTL) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator caching successful JSON responses of a GET endpoint by URL.

    Only 200 responses are stored, since an entry holds the body alone and a
    hit is replayed as a 200 JSON body with ``X-Cache: HIT``. Status codes,
    headers and cookies the endpoint sets (on its Response parameter or a
    returned response) reach the client on a miss but are not replayed.

    Args:
        ttl: Time-to-live in seconds for entries written by this route.

    Returns:
        Decorator producing an endpoint that serves hits from the cache.

    Raises:
        CacheConfigurationError: If ttl is not a positive integer.
    """
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
        raise CacheConfigurationError(
            f"cache_response ttl must be a positive integer, got: {ttl!r}", "ttl"
        )

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        async def around(call: _RouteCall, call_endpoint: Callable[[], Awaitable[Any]]) -> Any:
            request = call.request
            cache = cache_from_request(request)
            if request.method not in READ_METHODS or cache is None or not cache.is_available():
                return await call_endpoint()

            key = response_cache_key(request)
            cached = await _lookup_best_effort(cache, key)
            if cached is not None:
                add_span_attributes(**{"cache.hit": True, "cache.key": key})
                return JSONResponse(content=cached, headers={CACHE_STATUS_HEADER: "HIT"})

            add_span_attributes(**{"cache.hit": False, "cache.key": key})
            result = await call_endpoint()
            status_code = call.status_code(result)
            is_json, body = _json_body(result)
            if not is_json or body is None or status_code != 200:
                return result

            if isinstance(result, Response):
                response = result
            else:
                # A returned response is sent as is, so carry over what the
                # endpoint set on its sub-response.
                response = JSONResponse(content=body, status_code=status_code)
                response.raw_headers.extend(call.response.raw_headers)
            response.headers[CACHE_STATUS_HEADER] = "MISS"
            _schedule_write(response, call, BackgroundTask(_store_best_effort, cache, key, body, ttl))
            return response

        return _endpoint_wrapper(func, around)

    return decorator


async def clear_patterns(cache: CacheProtocol, patterns: Iterable[str]) -> dict[str, int]:
    """Clear each pattern independently; a failing pattern does not stop the rest.

    Returns:
        Mapping of pattern to number of entries removed (0 on failure).
    """
    results: dict[str, int] = {}
    for pattern in patterns:
        try:
            results[pattern] = await cache.clear(pattern)
        except Exception as e:
            logger.warning("Error clearing cache pattern %s: %s", pattern, e)
            results[pattern] = 0
    return results


def invalidate_cache(*patterns: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator clearing cache patterns after a mutation endpoint succeeds.

    Clearing runs only for POST/PUT/PATCH/DELETE requests whose endpoint
    returned normally with a 2xx status (a returned response's, else the one
    set on its Response parameter, else the route's status_code). A raised
    exception or an error status leaves the cache untouched. Deletes are
    awaited (shielded from client disconnects) before the response is
    returned.

    Args:
        *patterns: Glob patterns to clear; defaults to everything (``cache:*``).

    Raises:
        CacheConfigurationError: If a pattern is empty or not a string.
    """
    resolved = patterns or (CACHE_CLEAR_ALL_PATTERN,)
    for pattern in resolved:
        if not isinstance(pattern, str) or not pattern.strip():
            raise CacheConfigurationError(
                f"invalidate_cache patterns must be non-empty strings, got: {pattern!r}",
                "patterns",
            )

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        async def around(call: _RouteCall, call_endpoint: Callable[[], Awaitable[Any]]) -> Any:
            request = call.request
            result = await call_endpoint()
            if request.method not in MUTATION_METHODS:
                return result
            status_code = call.status_code(result)
            if not _is_success(status_code):
                logger.debug(
                    "Skipping cache invalidation for %s %s (status %s)",
                    request.method,
                    request.url.path,
                    status_code,
                )
                return result
            cache = cache_from_request(request)
            if cache is None or not cache.is_available():
                return result
            cleared = await asyncio.shield(clear_patterns(cache, resolved))
            logger.debug("Invalidated cache after %s %s: %s", request.method, request.url.path, cleared)
            return result

        return _endpoint_wrapper(func, around)

    return decorator
