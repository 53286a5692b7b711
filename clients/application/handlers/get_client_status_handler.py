"""
GetClientStatusHandler.

Handler for a consumer's active attachment and entitlement.
"""

from django.utils import timezone

from clients.application.dto.client_dto import ClientStatusDTO
from clients.application.queries.get_client_status import GetClientStatusQuery
from core.domain.exceptions import ClientNotFoundError
from corporations.ports.corporation_repository import CorporationRepository


class GetClientStatusHandler:
    """Handler for GetClientStatusQuery."""

    def __init__(self, corporation_repository: CorporationRepository):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository

    async def handle(self, query: GetClientStatusQuery) -> ClientStatusDTO:
        """
        Handle get client status query.

        Args:
            query: GetClientStatusQuery

        Returns:
            ClientStatusDTO with corporation profile and current period

        Raises:
            ClientNotFoundError: If the consumer has no active attachment
        """
        if not query.consumer_key:
            raise ClientNotFoundError()

        found = await self.corporation_repository.find_active_attachment(query.consumer_key)
        if not found:
            raise ClientNotFoundError()

        corporation, attachment = found
        return ClientStatusDTO.from_entities(corporation, attachment, timezone.now())
