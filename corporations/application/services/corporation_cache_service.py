"""
Corporation cache service.

Caches the public corporation view. Every mutation that changes a
corporation's profile or its active client count invalidates it.
"""
import hashlib
import logging
from typing import Optional

from django.conf import settings

from core.infrastructure.cache_adapters import cache_adapter
from corporations.application.dto.corporation_dto import CorporationDTO

logger = logging.getLogger(__name__)

CACHE_TTL_CORPORATION = 300  # 5 minutes


class CorporationCacheService:
    """Service for caching corporation views."""

    @staticmethod
    def _corporation_key(code: str) -> str:
        """Generate cache key for a corporation view."""
        code_hash = hashlib.sha256(code.encode()).hexdigest()[:16]
        return f"corporation:view:{code_hash}"

    @staticmethod
    def _ttl() -> int:
        """Configured TTL in seconds."""
        return getattr(settings, "CORPORATION_CACHE_TTL", CACHE_TTL_CORPORATION)

    @staticmethod
    async def get_corporation(code: str) -> Optional[CorporationDTO]:
        """
        Get cached corporation view.

        Args:
            code: Corporation code

        Returns:
            Cached CorporationDTO or None
        """
        cached = await cache_adapter.get(CorporationCacheService._corporation_key(code))
        if not cached:
            return None
        try:
            return CorporationDTO.from_cache(cached)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Error deserializing cached corporation %s: %s", code, e)
            return None

    @staticmethod
    async def set_corporation(dto: CorporationDTO) -> None:
        """
        Cache a corporation view.

        Args:
            dto: CorporationDTO to cache
        """
        await cache_adapter.set(
            CorporationCacheService._corporation_key(dto.code),
            dto.to_cache(),
            timeout=CorporationCacheService._ttl(),
        )

    @staticmethod
    async def invalidate(*codes: str) -> None:
        """
        Invalidate cached views.

        Args:
            codes: Corporation codes
        """
        codes = sorted({code for code in codes if code})
        await cache_adapter.delete_many(
            CorporationCacheService._corporation_key(code) for code in codes
        )
        logger.debug("Invalidated corporation cache: %s", ", ".join(codes))
