"""
Exception hierarchy for HookGate.

All library-specific exceptions inherit from HookGateError for easy catching.

Rejected deliveries are NOT exceptions: gates report them as outcomes
(see hookgate.gates.base). These exceptions cover misconfiguration and
failures of collaborators such as key providers and body decoders.
"""

from __future__ import annotations

from typing import Any


class HookGateError(Exception):
    """
    Base exception for all HookGate errors.

    Example:
        >>> try:
        ...     router.add_route("/hooks", handler, gates=[SignatureGate()])
        ... except HookGateError as e:
        ...     print(f"Webhook setup error: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(HookGateError):
    """
    Configuration is missing or invalid.

    Raised when:
    - A route needs a context entry (e.g. a SigningKeyProvider) that is not registered
    - A key provider yields an empty secret
    - Required environment variables are not set
    """

    pass


class ValidationError(HookGateError):
    """
    A delivery's content is unusable.

    Base for errors about what the sender put on the wire, as opposed to
    how the receiver is set up.
    """

    pass


class DecodeError(ValidationError):
    """
    A request body could not be decoded.

    Raised by content decoders; SignatureGate turns it into a
    400 rejection carrying the message.
    """

    def __init__(
        self,
        message: str,
        content_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.content_type = content_type

    def __str__(self) -> str:
        return self.message


class KeyProviderError(HookGateError):
    """
    The signing key could not be obtained.

    Raised when:
    - The secret store is unreachable after retries
    - The secret store answers without a usable secret
    """

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.provider = provider

    def __str__(self) -> str:
        return f"[{self.provider}] {self.message}"
