"""
Route tree for webhook endpoints.

Routes are tried in registration order. For each route whose path and
method match, its gates run in stage order:

    EventGate (HEADERS) -> SignatureGate (BODY) -> handler(*admitted values)

A RejectContinue moves on to the next route, a RejectFatal answers
immediately. When no route accepts the request the caller sees 404 (or
405 when only the method was wrong); non-fatal reasons are not exposed.
"""

from __future__ import annotations

import inspect
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Sequence, Union

from hookgate.core.exceptions import ConfigurationError
from hookgate.core.logging import get_logger
from hookgate.core.types import DELIVERY_HEADER
from hookgate.gates.base import Admit, Gate, RejectFatal
from hookgate.gates.context import RouteContext
from hookgate.webhooks.request import WebhookRequest

logger = get_logger("routing.router")

Handler = Callable[..., Union[Any, Awaitable[Any]]]


@dataclass
class Response:
    """Minimal HTTP response produced by the router."""

    status_code: int = 200
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(cls, data: Any, status_code: int = 200) -> Response:
        return cls(
            status_code=status_code,
            body=json.dumps(data, default=str).encode("utf-8"),
            headers={"content-type": "application/json"},
        )

    @classmethod
    def error(cls, status_code: int, detail: str) -> Response:
        return cls.json({"detail": detail}, status_code=status_code)

    @classmethod
    def empty(cls, status_code: int = 204) -> Response:
        return cls(status_code=status_code)

    def json_body(self) -> Any:
        return json.loads(self.body) if self.body else None


@dataclass
class Route:
    """
    One endpoint: path, accepted methods, gates and handler.

    The handler receives one positional argument per gate, in the order the
    gates were declared.
    """

    path: str
    handler: Handler
    gates: tuple[Gate, ...] = ()
    methods: frozenset[str] = frozenset({"POST"})
    name: str = ""

    def __post_init__(self) -> None:
        self.gates = tuple(self.gates)
        self.methods = frozenset(m.upper() for m in self.methods)
        if not self.name:
            self.name = getattr(self.handler, "__name__", repr(self.handler))

    def matches_path(self, path: str) -> bool:
        return self.path.rstrip("/") == path.rstrip("/")

    def evaluation_order(self) -> list[int]:
        """Gate indexes sorted by stage; ties keep declaration order."""
        return sorted(range(len(self.gates)), key=lambda i: self.gates[i].stage)


class Router:
    """
    Ordered collection of routes sharing one RouteContext.

    Example:
        >>> router = Router(RouteContext(StaticKeyProvider("s3cr3t")))
        >>>
        >>> @router.route("/hooks", gates=[EventGate([EventKind.PUSH]), SignatureGate()])
        ... async def on_push(event, payload):
        ...     return {"ref": payload["ref"]}
        >>>
        >>> response = await router.dispatch(request)
    """

    def __init__(
        self,
        context: RouteContext | None = None,
        delivery_header: str = DELIVERY_HEADER,
    ) -> None:
        self.context = context or RouteContext()
        self.delivery_header = delivery_header
        self._routes: list[Route] = []

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    def add_route(
        self,
        path: str,
        handler: Handler,
        gates: Sequence[Gate] = (),
        methods: Iterable[str] = ("POST",),
        name: str = "",
    ) -> Route:
        """
        Register a route.

        Raises:
            ConfigurationError: If a gate needs a context entry that is not registered
        """
        route = Route(
            path=path,
            handler=handler,
            gates=tuple(gates),
            methods=frozenset(methods),
            name=name,
        )
        for gate in route.gates:
            for required in gate.requires:
                if required not in self.context:
                    raise ConfigurationError(
                        f"Route {route.name!r} uses {gate.name}, which needs a "
                        f"{required.__name__} in the route context"
                    )
        self._routes.append(route)
        return route

    def route(
        self,
        path: str,
        gates: Sequence[Gate] = (),
        methods: Iterable[str] = ("POST",),
        name: str = "",
    ) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""

        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, gates=gates, methods=methods, name=name)
            return handler

        return decorator

    async def dispatch(self, request: WebhookRequest) -> Response:
        """Find the route for `request` and run it."""
        delivery = request.header(self.delivery_header) or "-"
        path_matched = False

        for route in self._routes:
            if not route.matches_path(request.path):
                continue
            path_matched = True
            if request.method not in route.methods:
                continue

            admitted: dict[int, Any] = {}
            rejected = False
            for index in route.evaluation_order():
                gate = route.gates[index]
                try:
                    outcome = await gate.check(request, self.context)
                except Exception:
                    logger.exception(
                        f"{gate.name} failed on route {route.name!r}", extra={"delivery": delivery}
                    )
                    raise

                if isinstance(outcome, Admit):
                    admitted[index] = outcome.value
                    continue

                if isinstance(outcome, RejectFatal):
                    logger.warning(
                        f"Refused by {gate.name} on route {route.name!r}: "
                        f"{outcome.status_code} {outcome.reason}",
                        extra={"delivery": delivery},
                    )
                    return Response.error(outcome.status_code, outcome.reason)

                logger.debug(
                    f"Skipped route {route.name!r} ({gate.name}: {outcome.reason})",
                    extra={"delivery": delivery},
                )
                rejected = True
                break

            if rejected:
                continue

            args = [admitted[i] for i in range(len(route.gates))]
            logger.info(f"Dispatched to {route.name!r}", extra={"delivery": delivery})
            return await self._call_handler(route, args, delivery)

        if path_matched:
            # Path exists but no route accepted: either wrong method or all gates fell through
            if not any(
                request.method in r.methods for r in self._routes if r.matches_path(request.path)
            ):
                return Response.error(405, "Method not allowed")
        logger.info(
            f"No route matched {request.method} {request.path}", extra={"delivery": delivery}
        )
        return Response.error(404, "Not found")

    async def _call_handler(self, route: Route, args: list[Any], delivery: str) -> Response:
        try:
            result = route.handler(*args)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.exception(f"Handler {route.name!r} failed", extra={"delivery": delivery})
            raise

        if isinstance(result, Response):
            return result
        if result is None:
            return Response.empty()
        return Response.json(result)
