"""
UpdateCorporationHandler.

Handles profile changes for self-service clients and administrators.
"""

import logging

from core.domain.exceptions import (
    AuthorizationError,
    ClientNotFoundError,
    CodeAlreadyUsedError,
    CorporationNotFoundError,
)
from core.domain.value_objects import CorporationCode
from core.infrastructure.events import event_bus
from corporations.application.commands.update_corporation import UpdateCorporationCommand
from corporations.application.dto.corporation_dto import CorporationDTO
from corporations.application.services.corporation_cache_service import CorporationCacheService
from corporations.domain.corporation import Corporation
from corporations.domain.events import CorporationUpdated
from corporations.ports.corporation_repository import CorporationRepository

logger = logging.getLogger(__name__)


class UpdateCorporationHandler:
    """Handler for UpdateCorporationCommand."""

    def __init__(self, corporation_repository: CorporationRepository):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository

    async def _resolve_target(self, command: UpdateCorporationCommand) -> Corporation:
        """Find the corporation the caller may update."""
        if command.is_admin and command.target_code:
            corporation = await self.corporation_repository.find_by_code(command.target_code)
            if not corporation:
                raise CorporationNotFoundError()
            return corporation

        if not command.consumer_key:
            raise ClientNotFoundError()
        found = await self.corporation_repository.find_active_attachment(command.consumer_key)
        if not found:
            raise ClientNotFoundError()
        corporation, _ = found
        return corporation

    async def handle(self, command: UpdateCorporationCommand) -> CorporationDTO:
        """
        Handle update corporation command.

        Args:
            command: UpdateCorporationCommand

        Returns:
            CorporationDTO after the update

        Raises:
            ClientNotFoundError: If a self-service caller has no active attachment
            CorporationNotFoundError: If an administrator targets an unknown code
            AuthorizationError: If a non-administrator changes the banned flag
            CodeUnspecifiedError: If the new code is blank
            CodeAlreadyUsedError: If the new code belongs to another corporation
        """
        changes = dict(command.changes)
        if "banned" in changes and not command.is_admin:
            raise AuthorizationError("Only administrators may change the banned flag.")

        corporation = await self._resolve_target(command)

        if "code" in changes:
            changes["code"] = str(CorporationCode(changes["code"]))
            if changes["code"] != corporation.code and await self.corporation_repository.code_exists(
                changes["code"], exclude_id=corporation.id
            ):
                raise CodeAlreadyUsedError()

        changed_fields = sorted(
            name for name, value in changes.items() if getattr(corporation, name) != value
        )
        if not changed_fields:
            return CorporationDTO.from_entity(corporation)

        updated = corporation.update_profile(**changes)
        saved = await self.corporation_repository.save(updated)

        previous_code = corporation.code if saved.code != corporation.code else None
        logger.info(
            "Corporation %s updated: %s",
            saved.code,
            ", ".join(changed_fields),
            extra={"corporation_id": str(saved.id)},
        )

        await CorporationCacheService.invalidate(corporation.code, saved.code)
        await event_bus.publish(
            CorporationUpdated(
                corporation_id=saved.id,
                code=saved.code,
                changed_fields=changed_fields,
                previous_code=previous_code,
            )
        )

        return CorporationDTO.from_entity(saved)
