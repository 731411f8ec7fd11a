"""
Resilience Layer for HookGate.

Retry policies for key providers that fetch secrets over the network.
"""

from .retry import execute_with_retry, is_transient_error

__all__ = [
    "execute_with_retry",
    "is_transient_error",
]
