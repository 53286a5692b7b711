"""
GetCorporationHandler.

Handler for the public corporation view.
"""

from core.domain.exceptions import CorporationNotFoundError
from corporations.application.dto.corporation_dto import CorporationDTO
from corporations.application.queries.get_corporation import GetCorporationQuery
from corporations.application.services.corporation_cache_service import CorporationCacheService
from corporations.ports.corporation_repository import CorporationRepository


class GetCorporationHandler:
    """Handler for GetCorporationQuery."""

    def __init__(self, corporation_repository: CorporationRepository):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository

    async def handle(self, query: GetCorporationQuery) -> CorporationDTO:
        """
        Handle get corporation query.

        Args:
            query: GetCorporationQuery

        Returns:
            CorporationDTO with profile and active client count

        Raises:
            CorporationNotFoundError: If code is unknown
        """
        cached = await CorporationCacheService.get_corporation(query.code)
        if cached:
            return cached

        corporation = await self.corporation_repository.find_by_code(query.code)
        if not corporation:
            raise CorporationNotFoundError()

        result = CorporationDTO.from_entity(corporation)
        await CorporationCacheService.set_corporation(result)
        return result
