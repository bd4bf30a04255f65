from __future__ import annotations

from abc import ABC, abstractmethod


class CacheBackend(ABC):
    """
    Port for a shared key-value store with per-key expiry.

    Values are strings (callers serialize). Implementations may raise on
    connectivity problems; callers decide whether that is fatal.
    """

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...

    @abstractmethod
    def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``; returns the number deleted."""
        ...
