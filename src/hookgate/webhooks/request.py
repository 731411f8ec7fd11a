"""
Framework-agnostic view of an incoming webhook request.

Gates only need the method, the path, case-insensitive headers and a
single read of the raw body. Adapters (see hookgate.integrations) build a
WebhookRequest from whatever their host framework provides.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Mapping, Sequence, Union

import httpx

BodyReader = Callable[[], Awaitable[bytes]]
HeaderInput = Union[
    httpx.Headers,
    Mapping[str, str],
    Mapping[bytes, bytes],
    Sequence[tuple[str, str]],
    Sequence[tuple[bytes, bytes]],
]


class WebhookRequest:
    """
    Read-only request passed through the route tree.

    The body is pulled from `body_reader` at most once; later calls to
    body() return the same bytes. Pass `body` instead when the bytes are
    already in memory.
    """

    def __init__(
        self,
        method: str = "POST",
        path: str = "/",
        headers: HeaderInput | None = None,
        body: bytes | None = None,
        body_reader: BodyReader | None = None,
    ) -> None:
        if body is not None and body_reader is not None:
            raise ValueError("Pass either body or body_reader, not both")
        self.method = method.upper()
        self.path = path
        self.headers = httpx.Headers(headers)
        self._body = body
        self._body_reader = body_reader
        self._consumed = False

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def body_consumed(self) -> bool:
        """True once body() has been awaited."""
        return self._consumed

    async def body(self) -> bytes:
        """Return the raw body bytes exactly as received."""
        if self._body is None:
            if self._body_reader is None:
                self._body = b""
            else:
                self._body = await self._body_reader()
                self._body_reader = None
        self._consumed = True
        return self._body

    def __repr__(self) -> str:
        return f"WebhookRequest(method={self.method!r}, path={self.path!r})"
