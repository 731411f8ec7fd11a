"""
Retry Strategies using Tenacity.

Used by key providers that reach a secret store. Gates never retry:
a rejected delivery is final.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import httpx
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from hookgate.core.logging import get_logger

logger = get_logger("resilience.retry")

DEFAULT_ATTEMPTS = 3


def is_transient_error(exception: BaseException) -> bool:
    """Check if exception is a transient network/infrastructure error."""
    if isinstance(exception, (httpx.TransportError, RedisConnectionError, RedisTimeoutError)):
        return True
    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        return status == 429 or 500 <= status < 600
    return False


def _log_retry(retry_state: Any) -> None:
    logger.warning(
        f"Retrying secret fetch... (Attempt {retry_state.attempt_number}): "
        f"{retry_state.outcome.exception()!r}"
    )


async def execute_with_retry(
    func: Callable[..., Awaitable[Any]],
    *args: Any,
    attempts: int = DEFAULT_ATTEMPTS,
    max_wait: float = 4.0,
    **kwargs: Any,
) -> Any:
    """
    Execute an async function, retrying transient errors with exponential backoff.

    Non-transient errors and the last transient error are re-raised unchanged.
    """
    async for attempt in AsyncRetrying(
        retry=retry_if_exception(is_transient_error),
        wait=wait_exponential(multiplier=0.2, max=max_wait),
        stop=stop_after_attempt(attempts),
        reraise=True,
        before_sleep=_log_retry,
    ):
        with attempt:
            return await func(*args, **kwargs)
