"""
Configuration management for HookGate.

Handles loading configuration from environment variables and validation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

from hookgate.core.types import DEFAULT_CONTENT_TYPE, DELIVERY_HEADER, EVENT_HEADER

SUPPORTED_ALGORITHMS = ("sha1", "sha256", "sha512")
KEY_BACKENDS = ("static", "env", "redis", "http")


def _get_env_var(name: str, default: str | None = None, required: bool = False) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name, default)
    if required and not value:
        raise ValueError(f"Required environment variable {name} is not set")
    return value


@dataclass(frozen=True)
class Config:
    """Webhook receiver configuration."""

    webhook_secret: str | None = None
    signature_algorithm: str = "sha1"
    # None means the default header for the algorithm (X-Hub-Signature / X-Hub-Signature-256)
    signature_header: str | None = None
    event_header: str = EVENT_HEADER
    delivery_header: str = DELIVERY_HEADER
    default_content_type: str = DEFAULT_CONTENT_TYPE

    # Key provider selection
    key_backend: str = "static"
    key_cache_ttl: float = 0.0  # seconds, 0 disables caching
    secret_env_var: str = "HOOKGATE_WEBHOOK_SECRET"
    redis_url: str = "redis://localhost:6379/0"
    redis_key: str = "hookgate:webhook_secret"
    secret_url: str | None = None
    secret_token: str | None = None
    secret_field: str | None = None
    secret_fetch_timeout: float = 5.0

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.signature_algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported signature algorithm: {self.signature_algorithm}. "
                f"Supported: {list(SUPPORTED_ALGORITHMS)}"
            )
        if self.key_backend not in KEY_BACKENDS:
            raise ValueError(
                f"Unknown key backend: {self.key_backend}. Supported: {list(KEY_BACKENDS)}"
            )
        if self.key_cache_ttl < 0:
            raise ValueError("key_cache_ttl must be >= 0")
        if self.key_backend == "http" and not self.secret_url:
            raise ValueError("secret_url is required for the http key backend")

    @classmethod
    def from_env(cls, **overrides: Any) -> Config:
        """Load configuration from environment variables."""
        values: dict[str, Any] = {
            "webhook_secret": _get_env_var("HOOKGATE_WEBHOOK_SECRET"),
            "signature_algorithm": (
                _get_env_var("HOOKGATE_SIGNATURE_ALGORITHM", default="sha1") or "sha1"
            ).lower(),
            "signature_header": _get_env_var("HOOKGATE_SIGNATURE_HEADER"),
            "event_header": _get_env_var("HOOKGATE_EVENT_HEADER", default=EVENT_HEADER),
            "delivery_header": _get_env_var("HOOKGATE_DELIVERY_HEADER", default=DELIVERY_HEADER),
            "default_content_type": _get_env_var(
                "HOOKGATE_DEFAULT_CONTENT_TYPE", default=DEFAULT_CONTENT_TYPE
            ),
            "key_backend": (_get_env_var("HOOKGATE_KEY_BACKEND", default="static") or "static").lower(),
            "key_cache_ttl": float(_get_env_var("HOOKGATE_KEY_CACHE_TTL", default="0") or 0),
            "redis_url": _get_env_var("HOOKGATE_REDIS_URL", default=cls.redis_url),
            "redis_key": _get_env_var("HOOKGATE_REDIS_KEY", default=cls.redis_key),
            "secret_url": _get_env_var("HOOKGATE_SECRET_URL"),
            "secret_token": _get_env_var("HOOKGATE_SECRET_TOKEN"),
            "secret_field": _get_env_var("HOOKGATE_SECRET_FIELD"),
            "log_level": _get_env_var("HOOKGATE_LOG_LEVEL", default="INFO"),
        }
        values.update(overrides)
        return cls(**values)

    def with_updates(self, **updates: Any) -> Config:
        """Create a new Config with updated values."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update(updates)
        return Config(**current)

    def masked_secret(self) -> str:
        """Return the webhook secret with most characters masked for safe logging."""
        if not self.webhook_secret or len(self.webhook_secret) <= 8:
            return "****"
        return self.webhook_secret[:2] + "..." + self.webhook_secret[-2:]
