"""
Cache abstraction (port).

Read-through views are cached behind this interface so handlers never
depend on a concrete cache backend.
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional


class CachePort(ABC):
    """Abstract cache port."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds (None for the backend default)
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value from cache."""
        pass

    @abstractmethod
    async def delete_many(self, keys: Iterable[str]) -> None:
        """Delete several values from cache."""
        pass
