"""
Redis-backed signing key provider.

Reads the webhook secret from a Redis string key, so a fleet of receivers
can rotate the secret in one place.
"""

from __future__ import annotations

import os

import redis.asyncio as redis

from hookgate.core.exceptions import KeyProviderError
from hookgate.core.logging import get_logger
from hookgate.keys.base import SigningKeyProvider, to_key_bytes
from hookgate.resilience.retry import execute_with_retry

logger = get_logger("keys.redis")


class RedisKeyProvider(SigningKeyProvider):
    """
    Fetches the secret with GET on every call.

    Wrap in CachedKeyProvider to avoid a round trip per delivery.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        key: str = "hookgate:webhook_secret",
        client: redis.Redis | None = None,
    ) -> None:
        """
        Args:
            redis_url: Redis connection URL (or from HOOKGATE_REDIS_URL env)
            key: Redis key holding the secret
            client: Pre-built client (overrides redis_url)
        """
        self._redis_url = redis_url or os.environ.get(
            "HOOKGATE_REDIS_URL",
            "redis://localhost:6379/0",
        )
        self._key = key
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> redis.Redis:
        """Lazy-load Redis client."""
        if self._client is None:
            self._client = redis.from_url(self._redis_url)
        return self._client

    async def _fetch(self) -> bytes | str | None:
        return await self._get_client().get(self._key)

    async def get_key(self) -> bytes:
        secret = await execute_with_retry(self._fetch)
        if secret is None:
            raise KeyProviderError(f"Redis key {self._key!r} is not set", provider="redis")
        return to_key_bytes(secret, self.name)

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
