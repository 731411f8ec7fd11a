"""
Gate base classes and outcomes.

A gate inspects a request on behalf of one route and returns an outcome:

- Admit(value): the check passed; `value` is forwarded to the handler
- RejectContinue(...): this route does not apply; the router tries the next one
- RejectFatal(...): stop routing and answer with the rejection's status code

The fatal/non-fatal split is what keeps a forged delivery from falling
through to a less protected route.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from hookgate.gates.context import RouteContext
    from hookgate.webhooks.request import WebhookRequest


class Rejection(str, Enum):
    """Why a gate refused a request."""

    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    UNSUPPORTED_MEDIA = "unsupported_media"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    Rejection.UNAUTHORIZED: 401,
    Rejection.BAD_REQUEST: 400,
    Rejection.UNSUPPORTED_MEDIA: 415,
}


class GateStage(IntEnum):
    """
    Evaluation phase of a gate within a route.

    Header-only gates run before body-consuming ones, whatever the
    declaration order, so route selection never reads the body.
    """

    HEADERS = 10
    BODY = 20


@dataclass(frozen=True)
class Admit:
    """The request passed; `value` is handed to the route handler."""

    value: Any = None

    @property
    def allowed(self) -> bool:
        return True

    @property
    def fatal(self) -> bool:
        return False


@dataclass(frozen=True)
class RejectContinue:
    """The route does not apply to this request; try sibling routes."""

    rejection: Rejection
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return False

    @property
    def fatal(self) -> bool:
        return False

    @property
    def status_code(self) -> int:
        return self.rejection.status_code


@dataclass(frozen=True)
class RejectFatal:
    """The request is refused outright; no other route may be tried."""

    rejection: Rejection
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return False

    @property
    def fatal(self) -> bool:
        return True

    @property
    def status_code(self) -> int:
        return self.rejection.status_code


Outcome = Union[Admit, RejectContinue, RejectFatal]


class Gate(ABC):
    """
    Abstract base class for route gates.

    Subclasses declare the context entries they need in `requires` so the
    router can refuse to build a route whose context is incomplete.
    """

    stage: GateStage = GateStage.HEADERS
    requires: tuple[type, ...] = ()

    @property
    def name(self) -> str:
        """Identifier used in logs."""
        return type(self).__name__

    @abstractmethod
    async def check(self, request: WebhookRequest, context: RouteContext) -> Outcome:
        """Inspect the request and decide."""
        ...
