"""
Gates module - per-route checks on incoming webhook requests.

- SignatureGate: verifies the HMAC of the raw body and decodes it (fatal on failure)
- EventGate: routes by the event header (falls through on mismatch)

Example:
    >>> from hookgate.gates import EventGate, SignatureGate
    >>> from hookgate.core.types import EventKind
    >>>
    >>> gates = [EventGate([EventKind.PUSH]), SignatureGate()]
    >>> router.add_route("/hooks", on_push, gates=gates)
"""

from hookgate.gates.base import (
    Admit,
    Gate,
    GateStage,
    Outcome,
    Rejection,
    RejectContinue,
    RejectFatal,
)
from hookgate.gates.context import RouteContext
from hookgate.gates.event import EventGate, match_event
from hookgate.gates.signature import SignatureGate

__all__ = [
    # Outcomes
    "Admit",
    "RejectContinue",
    "RejectFatal",
    "Outcome",
    "Rejection",
    # Base classes
    "Gate",
    "GateStage",
    "RouteContext",
    # Concrete gates
    "EventGate",
    "SignatureGate",
    "match_event",
]
