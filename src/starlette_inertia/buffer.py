from __future__ import annotations

from typing import Optional

from starlette.datastructures import MutableHeaders
from starlette.types import Message, Send

from .headers import HEADER_LOCATION


class ResponseBuffer:
    """
    ASGI `send` replacement that keeps the response in memory.

    The middleware hands an instance to the downstream app in place of the real
    `send`, inspects status/headers/body once the app returns, rewrites them if a
    protocol rule applies and only then commits to the real `send`.

    Inertia responses are JSON and small, so holding the whole body is fine.
    """

    def __init__(self, status_code: int = 200, headers: Optional[MutableHeaders] = None) -> None:
        self.status_code = status_code
        self.headers = headers if headers is not None else MutableHeaders()
        self.body = bytearray()
        self.started = False

    @classmethod
    def wrap(cls, send: Send) -> "ResponseBuffer":
        # A buffer under a buffer: reuse the outer one so nested middleware
        # inspect the same state and nothing is buffered twice.
        if isinstance(send, ResponseBuffer):
            return send
        return cls()

    async def __call__(self, message: Message) -> None:
        message_type = message.get("type")
        if message_type == "http.response.start":
            self.status_code = int(message["status"])
            for key, value in message.get("headers") or []:
                self.headers.append(key.decode("latin-1"), value.decode("latin-1"))
            self.started = True
        elif message_type == "http.response.body":
            self.body.extend(message.get("body") or b"")

    def is_empty(self) -> bool:
        return len(self.body) == 0

    def write(self, data: bytes) -> None:
        self.body.extend(data)

    def discard(self) -> None:
        self.body.clear()

    def inertia_location(self, url: str) -> None:
        """Turn the buffered response into a 409 that makes the client do a full visit to `url`."""
        self.discard()
        del self.headers["location"]
        self.headers[HEADER_LOCATION] = url
        self.status_code = 409

    async def commit(self, send: Send) -> None:
        if send is self:
            return
        self.headers["content-length"] = str(len(self.body))
        await send({"type": "http.response.start", "status": self.status_code, "headers": self.headers.raw})
        await send({"type": "http.response.body", "body": bytes(self.body), "more_body": False})
