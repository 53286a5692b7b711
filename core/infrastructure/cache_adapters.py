"""
Cache adapter implementations.

Provides the Django cache implementation of CachePort. The backend is
Redis outside tests and LocMemCache in tests.

Cache failures degrade to a miss: storage stays the source of truth,
so a cache outage slows reads down but never fails them.
"""

import logging
from typing import Any, Iterable, Optional

from asgiref.sync import sync_to_async
from django.core.cache import cache

from core.infrastructure.cache import CachePort
from core.metrics import cache_hits_total, cache_misses_total

logger = logging.getLogger(__name__)


def _namespace(key: str) -> str:
    """Metric label for a key: its first two segments."""
    return ":".join(key.split(":")[:2])


class DjangoCacheAdapter(CachePort):
    """Django cache adapter implementing CachePort."""

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or the cache is down
        """
        try:
            value = await sync_to_async(cache.get)(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error getting from cache: %s", e, exc_info=True)
            cache_misses_total.labels(namespace=_namespace(key)).inc()
            return None

        if value is None:
            logger.debug("Cache miss: %s", key)
            cache_misses_total.labels(namespace=_namespace(key)).inc()
        else:
            logger.debug("Cache hit: %s", key)
            cache_hits_total.labels(namespace=_namespace(key)).inc()
        return value

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds
        """
        try:
            await sync_to_async(cache.set)(key, value, timeout=timeout)
            logger.debug("Cache set: %s (timeout=%s)", key, timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error setting cache: %s", e, exc_info=True)

    async def delete(self, key: str) -> None:
        """
        Delete a value from cache.

        Args:
            key: Cache key
        """
        await self.delete_many([key])

    async def delete_many(self, keys: Iterable[str]) -> None:
        """
        Delete several values from cache.

        Args:
            keys: Cache keys
        """
        keys = list(keys)
        if not keys:
            return
        try:
            await sync_to_async(cache.delete_many)(keys)
            logger.debug("Cache delete: %s", ", ".join(keys))
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error deleting from cache: %s", e, exc_info=True)


# Global cache instance
cache_adapter = DjangoCacheAdapter()
