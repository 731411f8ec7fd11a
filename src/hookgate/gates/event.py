"""
EventGate: select a route by the webhook event header.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from hookgate.core.logging import get_logger
from hookgate.core.types import EVENT_HEADER, EventKind
from hookgate.gates.base import Admit, Gate, GateStage, Outcome, Rejection, RejectContinue

if TYPE_CHECKING:
    from hookgate.gates.context import RouteContext
    from hookgate.webhooks.request import WebhookRequest

logger = get_logger("gates.event")


def match_event(allowed: EventKind, header_value: str) -> EventKind | None:
    """
    Match one allowed entry against the event header.

    WILDCARD resolves the header through the canonical name table and
    yields the concrete kind. A concrete entry matches only its exact name.
    """
    if allowed.is_wildcard:
        try:
            return EventKind.from_name(header_value)
        except ValueError:
            return None
    if allowed.value == header_value:
        return allowed
    return None


class EventGate(Gate):
    """
    Admit requests whose event header names one of `events`.

    Entries are tried in declaration order and the first match wins; the
    resolved concrete EventKind is forwarded to the handler. Failures are
    never fatal, so sibling routes can handle other events.

    Example:
        >>> router.add_route("/hooks", on_push, gates=[EventGate([EventKind.PUSH]), SignatureGate()])
    """

    stage = GateStage.HEADERS

    def __init__(self, events: Iterable[EventKind], header: str = EVENT_HEADER) -> None:
        self.events: tuple[EventKind, ...] = tuple(events)
        if not self.events:
            raise ValueError("EventGate needs at least one event kind")
        for event in self.events:
            if not isinstance(event, EventKind):
                raise TypeError(f"Expected EventKind, got {event!r}")
        self.header = header

    @property
    def name(self) -> str:
        return f"EventGate[{','.join(e.value for e in self.events)}]"

    async def check(self, request: WebhookRequest, context: RouteContext) -> Outcome:
        header_value = request.header(self.header)
        if header_value is None:
            logger.debug(f"{self.name}: no {self.header} header")
            return RejectContinue(Rejection.UNAUTHORIZED, f"Missing {self.header} header")

        for allowed in self.events:
            matched = match_event(allowed, header_value)
            if matched is not None:
                return Admit(matched)

        logger.debug(f"{self.name}: event {header_value!r} not accepted")
        return RejectContinue(Rejection.BAD_REQUEST, f"Event {header_value!r} not accepted")
