"""
HTTP secret-store key provider.

Fetches the webhook secret from an HTTP endpoint (a secrets manager, a
config service). The response is either the raw secret or a JSON document
from which `field` is extracted, using dotted paths such as "data.value".
"""

from __future__ import annotations

from typing import Any

import httpx

from hookgate.core.exceptions import KeyProviderError
from hookgate.core.logging import get_logger
from hookgate.keys.base import SigningKeyProvider, to_key_bytes
from hookgate.resilience.retry import execute_with_retry

logger = get_logger("keys.http")


class HttpKeyProvider(SigningKeyProvider):
    """
    GETs the secret from `url` on every call, retrying transient failures.

    Usage:
        provider = CachedKeyProvider(
            HttpKeyProvider("https://vault.internal/v1/secret/hook", token="...", field="data.value"),
            ttl=300,
        )
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        field: str | None = None,
        timeout: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            url: Secret endpoint
            token: Optional bearer token sent as Authorization header
            field: Dotted path into a JSON response; None means the body is the secret
            timeout: Per-request timeout in seconds
            http_client: Shared httpx client (for connection pooling)
        """
        self._url = url
        self._token = token
        self._field = field
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = False

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy-init HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._http_client

    async def _fetch(self) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        response = await self._get_client().get(self._url, headers=headers)
        response.raise_for_status()
        return response

    def _extract(self, response: httpx.Response) -> str:
        if self._field is None:
            return response.text.strip()

        try:
            value: Any = response.json()
        except ValueError as e:
            raise KeyProviderError(f"Secret endpoint did not return JSON: {e}", provider="http") from e

        for part in self._field.split("."):
            if not isinstance(value, dict) or part not in value:
                raise KeyProviderError(
                    f"Field {self._field!r} not found in secret response", provider="http"
                )
            value = value[part]

        if not isinstance(value, str):
            raise KeyProviderError(f"Field {self._field!r} is not a string", provider="http")
        return value

    async def get_key(self) -> bytes:
        try:
            response = await execute_with_retry(self._fetch)
        except httpx.HTTPError as e:
            logger.error(f"Secret fetch from {self._url} failed: {e}")
            raise KeyProviderError(f"Secret fetch failed: {e}", provider="http") from e
        return to_key_bytes(self._extract(response), self.name)

    async def close(self) -> None:
        """Close owned HTTP client."""
        if self._owns_client and self._http_client:
            await self._http_client.aclose()
            self._http_client = None
