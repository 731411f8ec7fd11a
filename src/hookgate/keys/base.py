"""
Signing key providers.

A SigningKeyProvider yields the current webhook secret each time a signed
delivery is verified. Providers are configured once per server and placed
in the route context; gates never mutate them.
"""

from __future__ import annotations

import inspect
import os
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Union

from hookgate.core.exceptions import ConfigurationError

SecretSource = Callable[[], Union[str, bytes, Awaitable[Union[str, bytes]]]]


def to_key_bytes(secret: str | bytes | None, provider: str) -> bytes:
    """Normalize a secret to bytes, rejecting empty values."""
    if secret is None or len(secret) == 0:
        raise ConfigurationError(f"{provider} produced an empty signing key")
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return bytes(secret)


class SigningKeyProvider(ABC):
    """
    Abstract supplier of the HMAC signing key.

    get_key() is invoked once per signed request and may perform I/O.
    Implementations that cache must be safe for concurrent callers.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def get_key(self) -> bytes:
        """Return the current signing key."""
        ...

    async def close(self) -> None:
        """Release any connection held by the provider."""
        pass


class StaticKeyProvider(SigningKeyProvider):
    """A key that never changes, e.g. read once from a file at startup."""

    def __init__(self, secret: str | bytes) -> None:
        self._key = to_key_bytes(secret, "StaticKeyProvider")

    async def get_key(self) -> bytes:
        return self._key


class CallableKeyProvider(SigningKeyProvider):
    """
    Wraps a zero-argument function returning the secret.

    The function may be sync or async and may return str or bytes.
    """

    def __init__(self, source: SecretSource) -> None:
        self._source = source

    async def get_key(self) -> bytes:
        secret = self._source()
        if inspect.isawaitable(secret):
            secret = await secret
        return to_key_bytes(secret, self.name)


class EnvKeyProvider(SigningKeyProvider):
    """Reads the secret from an environment variable on every call, so rotations apply without restart."""

    def __init__(self, var: str = "HOOKGATE_WEBHOOK_SECRET") -> None:
        self._var = var

    async def get_key(self) -> bytes:
        secret = os.environ.get(self._var)
        if not secret:
            raise ConfigurationError(f"Environment variable {self._var} is not set")
        return secret.encode("utf-8")
