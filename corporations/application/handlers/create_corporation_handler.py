"""
CreateCorporationHandler.

Handles the create corporation command.
"""

import logging

from core.domain.exceptions import CodeAlreadyUsedError
from core.infrastructure.events import event_bus
from corporations.application.commands.create_corporation import CreateCorporationCommand
from corporations.application.dto.corporation_dto import CorporationDTO
from corporations.application.services.corporation_cache_service import CorporationCacheService
from corporations.domain.corporation import Corporation
from corporations.domain.events import CorporationCreated
from corporations.ports.corporation_repository import CorporationRepository

logger = logging.getLogger(__name__)


class CreateCorporationHandler:
    """Handler for CreateCorporationCommand."""

    def __init__(self, corporation_repository: CorporationRepository):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository

    async def handle(self, command: CreateCorporationCommand) -> CorporationDTO:
        """
        Handle create corporation command.

        Args:
            command: CreateCorporationCommand

        Returns:
            CorporationDTO of the new corporation

        Raises:
            CodeUnspecifiedError: If code is missing or blank
            CodeAlreadyUsedError: If code is taken
        """
        corporation = Corporation.create(
            code=command.code,
            description=command.description,
            town=command.town,
            city=command.city,
        )

        # The unique index is authoritative; this only avoids a failed insert.
        if await self.corporation_repository.code_exists(corporation.code):
            raise CodeAlreadyUsedError()

        saved = await self.corporation_repository.save(corporation)
        logger.info("Corporation %s created", saved.code, extra={"corporation_id": str(saved.id)})

        await CorporationCacheService.invalidate(saved.code)
        await event_bus.publish(CorporationCreated(corporation_id=saved.id, code=saved.code))

        return CorporationDTO.from_entity(saved)
