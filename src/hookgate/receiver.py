"""
WebhookReceiver: configuration-driven facade over Router and the gates.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from starlette.applications import Starlette

from hookgate.core.config import Config
from hookgate.core.logging import get_logger
from hookgate.core.types import EventKind
from hookgate.gates.context import RouteContext
from hookgate.gates.event import EventGate
from hookgate.gates.signature import SignatureGate
from hookgate.integrations.starlette import create_app
from hookgate.keys import SigningKeyProvider, get_key_provider
from hookgate.routing.router import Handler, Response, Router
from hookgate.webhooks.content import ContentDecoders
from hookgate.webhooks.request import WebhookRequest
from hookgate.webhooks.signature import SignatureScheme

logger = get_logger("receiver")


class WebhookReceiver:
    """
    Signed, event-routed webhook endpoints built from one Config.

    Example:
        >>> receiver = WebhookReceiver(Config.from_env())
        >>>
        >>> @receiver.on(EventKind.PUSH)
        ... async def on_push(event, payload):
        ...     print(payload["ref"])
        >>>
        >>> app = receiver.asgi_app()
    """

    def __init__(
        self,
        config: Config | None = None,
        key_provider: SigningKeyProvider | None = None,
        decoders: ContentDecoders | None = None,
    ) -> None:
        """
        Args:
            config: Receiver configuration (defaults to Config.from_env())
            key_provider: Overrides the provider selected by config.key_backend
            decoders: Body decoders (defaults to JSON + form)
        """
        self.config = config or Config.from_env()
        self.key_provider = key_provider or get_key_provider(self.config)
        self.scheme = SignatureScheme.for_algorithm(
            self.config.signature_algorithm, header=self.config.signature_header
        )
        self.decoders = decoders or ContentDecoders.default(self.config.default_content_type)
        self.router = Router(
            RouteContext(self.key_provider),
            delivery_header=self.config.delivery_header,
        )
        logger.debug(
            f"Receiver ready: {self.scheme.algorithm} via {self.scheme.header}, "
            f"key provider {self.key_provider.name}"
        )

    def signature_gate(self) -> SignatureGate:
        return SignatureGate(scheme=self.scheme, decoders=self.decoders)

    def event_gate(self, *events: EventKind) -> EventGate:
        return EventGate(events, header=self.config.event_header)

    def on(
        self,
        *events: EventKind,
        path: str = "/",
        signed: bool = True,
    ) -> Callable[[Handler], Handler]:
        """
        Register a handler for `events` at `path`.

        The handler receives the resolved EventKind and, when `signed`, the
        verified decoded payload.
        """
        gates: Sequence[Any] = [self.event_gate(*events)]
        if signed:
            gates = [*gates, self.signature_gate()]
        return self.router.route(path, gates=gates)

    async def dispatch(self, request: WebhookRequest) -> Response:
        return await self.router.dispatch(request)

    def asgi_app(self, debug: bool = False) -> Starlette:
        """Starlette application serving this receiver."""
        return create_app(self.router, debug=debug)

    async def close(self) -> None:
        await self.key_provider.close()
