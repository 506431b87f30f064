from __future__ import annotations

from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection, Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .buffer import ResponseBuffer
from .headers import (
    HEADER_INERTIA,
    inertia_version_from_request,
    is_inertia_request,
    is_see_other_method,
    referer_from_request,
    request_uri,
)
from .inertia import Inertia


def _add_vary(headers: MutableHeaders) -> None:
    present = {v.strip().lower() for v in headers.get("vary", "").split(",")}
    if HEADER_INERTIA.lower() not in present:
        headers.add_vary_header(HEADER_INERTIA)


class InertiaMiddleware:
    """
    Applies the Inertia protocol rules to responses of Inertia visits.

    Every response gets `Vary: X-Inertia`. Plain requests pass straight through;
    Inertia visits are buffered and, before anything reaches the client:

    - GET with a stale `X-Inertia-Version` becomes a 409 location visit to the same URI
    - an empty 200 becomes a 409 location visit to the referer (when there is one)
    - a 302 answering PUT/PATCH/DELETE becomes a 303
    """

    def __init__(self, app: ASGIApp, *, inertia: Inertia) -> None:
        self.app = app
        self.inertia = inertia

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        conn = HTTPConnection(scope)
        if not is_inertia_request(conn):

            async def send_with_vary(message: Message) -> None:
                if message.get("type") == "http.response.start":
                    _add_vary(MutableHeaders(scope=message))
                await send(message)

            await self.app(scope, receive, send_with_vary)
            return

        buffer = ResponseBuffer.wrap(send)
        await self.app(scope, receive, buffer)

        self._apply_rules(conn, buffer)
        _add_vary(buffer.headers)
        try:
            await buffer.commit(send)
        except OSError as e:
            # The client may already be gone; nothing left to do but record it.
            self.inertia.logger.warning("cannot copy inertia response to the client: %s", e)

    def _apply_rules(self, conn: HTTPConnection, buffer: ResponseBuffer) -> None:
        method = conn.scope.get("method", "GET")

        # https://inertiajs.com/asset-versioning
        if method == "GET" and inertia_version_from_request(conn) != self.inertia.version:
            self.inertia.logger.debug("asset version changed, forcing a full visit to %s", request_uri(conn))
            buffer.inertia_location(request_uri(conn))
            return

        if buffer.status_code == 200 and buffer.is_empty():
            back_url = referer_from_request(conn)
            if back_url:
                self.inertia.logger.debug("empty response, sending the client back to %s", back_url)
                buffer.inertia_location(back_url)
                return

        # https://inertiajs.com/redirects#303-response-code
        if buffer.status_code == 302 and is_see_other_method(method):
            buffer.status_code = 303


def install_inertia(app: Any, inertia: Inertia) -> None:
    """Register the middleware and expose the adapter as `app.state.inertia`."""
    app.state.inertia = inertia
    app.add_middleware(InertiaMiddleware, inertia=inertia)


def get_inertia(request: Request) -> Inertia:
    """FastAPI dependency returning the adapter installed by `install_inertia`."""
    return request.app.state.inertia
