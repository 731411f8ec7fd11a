"""
Route context: collaborators configured once per route tree.

Gates look up what they need (e.g. the SigningKeyProvider) by type at
evaluation time instead of receiving it with each request.
"""

from __future__ import annotations

from typing import Any, TypeVar

from hookgate.core.exceptions import ConfigurationError

T = TypeVar("T")


class RouteContext:
    """
    Type-keyed registry of shared collaborators.

    Lookups match by isinstance, so registering a StaticKeyProvider
    satisfies a request for SigningKeyProvider.

    Example:
        >>> context = RouteContext(StaticKeyProvider("s3cr3t"))
        >>> await context.get(SigningKeyProvider).get_key()
        b's3cr3t'
    """

    def __init__(self, *entries: Any) -> None:
        self._entries: list[Any] = []
        for entry in entries:
            self.add(entry)

    def add(self, entry: Any) -> RouteContext:
        """Register an entry. Earlier entries win on lookup."""
        self._entries.append(entry)
        return self

    def find(self, entry_type: type[T]) -> T | None:
        for entry in self._entries:
            if isinstance(entry, entry_type):
                return entry
        return None

    def get(self, entry_type: type[T]) -> T:
        """
        Return the first entry of `entry_type`.

        Raises:
            ConfigurationError: If no such entry is registered
        """
        entry = self.find(entry_type)
        if entry is None:
            raise ConfigurationError(
                f"Route context has no {entry_type.__name__} entry",
                details={"registered": [type(e).__name__ for e in self._entries]},
            )
        return entry

    def __contains__(self, entry_type: type) -> bool:
        return self.find(entry_type) is not None

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
