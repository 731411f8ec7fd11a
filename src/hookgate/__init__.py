"""
HookGate - Signed, event-routed webhook receivers.

Verifies that a delivery really comes from the webhook sender (HMAC of the
raw body) and routes it to the handlers interested in its event.

Usage:
    >>> from hookgate import EventGate, EventKind, Router, RouteContext, SignatureGate
    >>> from hookgate import StaticKeyProvider
    >>>
    >>> router = Router(RouteContext(StaticKeyProvider("s3cr3t")))
    >>>
    >>> @router.route("/hooks", gates=[EventGate([EventKind.PUSH]), SignatureGate()])
    ... async def on_push(event, payload):
    ...     print(payload["ref"])
"""

from hookgate.core.config import Config
from hookgate.core.exceptions import (
    ConfigurationError,
    DecodeError,
    HookGateError,
    KeyProviderError,
    ValidationError,
)
from hookgate.core.logging import configure_logging, get_logger
from hookgate.core.types import EventKind
from hookgate.gates import (
    Admit,
    EventGate,
    Gate,
    GateStage,
    Rejection,
    RejectContinue,
    RejectFatal,
    RouteContext,
    SignatureGate,
)
from hookgate.keys import (
    CachedKeyProvider,
    CallableKeyProvider,
    EnvKeyProvider,
    HttpKeyProvider,
    RedisKeyProvider,
    SigningKeyProvider,
    StaticKeyProvider,
    get_key_provider,
)
from hookgate.receiver import WebhookReceiver
from hookgate.routing import Response, Route, Router
from hookgate.webhooks import (
    SHA1_SCHEME,
    SHA256_SCHEME,
    ContentDecoders,
    SignatureScheme,
    WebhookRequest,
    compute_signature,
    verify_signature,
)

__version__ = "0.1.0"

__all__ = [
    # Facade
    "WebhookReceiver",
    "Config",
    # Routing
    "Router",
    "Route",
    "Response",
    "RouteContext",
    # Gates
    "Gate",
    "GateStage",
    "EventGate",
    "SignatureGate",
    "Admit",
    "RejectContinue",
    "RejectFatal",
    "Rejection",
    # Events
    "EventKind",
    # Keys
    "SigningKeyProvider",
    "StaticKeyProvider",
    "CallableKeyProvider",
    "EnvKeyProvider",
    "CachedKeyProvider",
    "RedisKeyProvider",
    "HttpKeyProvider",
    "get_key_provider",
    # Wire format
    "WebhookRequest",
    "ContentDecoders",
    "SignatureScheme",
    "SHA1_SCHEME",
    "SHA256_SCHEME",
    "compute_signature",
    "verify_signature",
    # Exceptions
    "HookGateError",
    "ConfigurationError",
    "ValidationError",
    "DecodeError",
    "KeyProviderError",
    # Logging
    "configure_logging",
    "get_logger",
]
