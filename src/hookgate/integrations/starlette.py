"""
Starlette / ASGI adapter.

Serves a HookGate Router as an ASGI application. The request body is
read lazily, only when a SignatureGate asks for it.

Example:
    >>> import uvicorn
    >>> app = create_app(router)
    >>> uvicorn.run(app, port=8080)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse
from starlette.routing import Mount
from starlette.types import Receive, Scope, Send

from hookgate.core.logging import get_logger
from hookgate.keys.base import SigningKeyProvider
from hookgate.routing.router import Router
from hookgate.webhooks.request import WebhookRequest

logger = get_logger("integrations.starlette")


def to_webhook_request(request: Request) -> WebhookRequest:
    """Wrap a Starlette request without reading its body."""
    return WebhookRequest(
        method=request.method,
        path=request.url.path,
        headers=request.headers.raw,
        body_reader=request.body,
    )


class WebhookApp:
    """ASGI app dispatching every HTTP request through `router`."""

    def __init__(self, router: Router) -> None:
        self.router = router

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            raise RuntimeError(f"WebhookApp only handles HTTP, got {scope['type']!r}")

        request = Request(scope, receive)
        response = await self.router.dispatch(to_webhook_request(request))
        await StarletteResponse(
            content=response.body,
            status_code=response.status_code,
            headers=response.headers,
        )(scope, receive, send)


def create_app(router: Router, debug: bool = False) -> Starlette:
    """
    Build a Starlette application serving `router` at the root.

    The key provider registered in the router's context is closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(f"Serving {len(router.routes)} webhook route(s)")
        yield
        provider = router.context.find(SigningKeyProvider)
        if provider is not None:
            await provider.close()

    return Starlette(
        debug=debug,
        routes=[Mount("/", app=WebhookApp(router))],
        lifespan=lifespan,
    )
