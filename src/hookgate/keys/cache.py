"""
TTL cache around another SigningKeyProvider.

Concurrent requests that find the cache stale wait on a single refresh
instead of each hitting the secret store.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from hookgate.core.logging import get_logger
from hookgate.keys.base import SigningKeyProvider

logger = get_logger("keys.cache")


class CachedKeyProvider(SigningKeyProvider):
    """
    Caches the key from an inner provider for `ttl` seconds.

    Failures of the inner provider are not cached.
    """

    def __init__(
        self,
        inner: SigningKeyProvider,
        ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._inner = inner
        self._ttl = ttl
        self._key: bytes | None = None
        self._expires_at = 0.0
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return f"CachedKeyProvider({self._inner.name})"

    def _fresh(self) -> bool:
        return self._key is not None and self._clock() < self._expires_at

    async def get_key(self) -> bytes:
        if self._fresh():
            return self._key  # type: ignore[return-value]

        async with self._lock:
            # Another waiter may have refreshed while we were queued
            if self._fresh():
                return self._key  # type: ignore[return-value]

            key = await self._inner.get_key()
            self._key = key
            self._expires_at = self._clock() + self._ttl
            logger.debug(f"Refreshed signing key from {self._inner.name} (ttl={self._ttl}s)")
            return key

    def invalidate(self) -> None:
        """Drop the cached key; the next call refreshes."""
        self._key = None
        self._expires_at = 0.0

    async def close(self) -> None:
        await self._inner.close()
