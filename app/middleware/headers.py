"""Raw ASGI helper for middleware that adds response headers.

Headers the endpoint (or an inner middleware) already set always win.
"""

from typing import Callable

RawHeaders = list[tuple[bytes, bytes]]


def encode_headers(headers: dict[str, str]) -> RawHeaders:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers.items()]


def DefaultHeadersMiddleware(app: Callable, resolve: Callable[[dict], RawHeaders]) -> Callable:
    """Append resolve(scope) headers to each HTTP response that lacks them."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        extra = resolve(scope)

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start" and extra:
                headers = list(message.get("headers", []))
                present = {name.lower() for name, _ in headers}
                headers.extend((name, value) for name, value in extra if name not in present)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
