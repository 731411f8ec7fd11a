"""
Signing key providers for HookGate.

Configuration via environment:
    HOOKGATE_KEY_BACKEND=static   # or 'env', 'redis', 'http'
    HOOKGATE_KEY_CACHE_TTL=300    # optional, seconds

Example:
    >>> from hookgate.keys import get_key_provider, StaticKeyProvider
    >>>
    >>> # From configuration
    >>> provider = get_key_provider(Config.from_env())
    >>>
    >>> # Or explicitly
    >>> provider = StaticKeyProvider("s3cr3t")
"""

from __future__ import annotations

from hookgate.core.config import Config
from hookgate.core.exceptions import ConfigurationError
from hookgate.keys.base import (
    CallableKeyProvider,
    EnvKeyProvider,
    SigningKeyProvider,
    StaticKeyProvider,
)
from hookgate.keys.cache import CachedKeyProvider
from hookgate.keys.http import HttpKeyProvider
from hookgate.keys.redis import RedisKeyProvider


def get_key_provider(config: Config) -> SigningKeyProvider:
    """
    Build the key provider selected by `config.key_backend`.

    Raises:
        ConfigurationError: If the static backend has no secret configured
    """
    provider: SigningKeyProvider
    if config.key_backend == "static":
        if not config.webhook_secret:
            raise ConfigurationError(
                "HOOKGATE_WEBHOOK_SECRET is required for the static key backend"
            )
        provider = StaticKeyProvider(config.webhook_secret)
    elif config.key_backend == "env":
        provider = EnvKeyProvider(config.secret_env_var)
    elif config.key_backend == "redis":
        provider = RedisKeyProvider(redis_url=config.redis_url, key=config.redis_key)
    else:
        provider = HttpKeyProvider(
            config.secret_url,  # type: ignore[arg-type]
            token=config.secret_token,
            field=config.secret_field,
            timeout=config.secret_fetch_timeout,
        )

    if config.key_cache_ttl > 0:
        provider = CachedKeyProvider(provider, ttl=config.key_cache_ttl)
    return provider


__all__ = [
    "SigningKeyProvider",
    "StaticKeyProvider",
    "CallableKeyProvider",
    "EnvKeyProvider",
    "CachedKeyProvider",
    "RedisKeyProvider",
    "HttpKeyProvider",
    "get_key_provider",
]
