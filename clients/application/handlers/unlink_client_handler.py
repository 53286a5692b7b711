"""
UnlinkClientHandler.

Handles the unlink client command.
"""

import logging

from django.utils import timezone

from clients.application.commands.unlink_client import UnlinkClientCommand
from clients.application.dto.client_dto import UnlinkedClientDTO
from clients.application.services.attachment_service import AttachmentService
from clients.domain.events import ClientUnlinked
from core.domain.exceptions import ClientNotFoundError, ConsumerKeyUnspecifiedError
from core.infrastructure.events import event_bus
from corporations.application.services.corporation_cache_service import CorporationCacheService
from corporations.ports.corporation_repository import CorporationRepository
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class UnlinkClientHandler:
    """Handler for UnlinkClientCommand."""

    def __init__(
        self,
        corporation_repository: CorporationRepository,
        license_key_repository: LicenseKeyRepository,
    ):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository
        self.license_key_repository = license_key_repository
        self.attachment_service = AttachmentService(corporation_repository, license_key_repository)

    async def handle(self, command: UnlinkClientCommand) -> UnlinkedClientDTO:
        """
        Handle unlink client command.

        Args:
            command: UnlinkClientCommand

        Returns:
            UnlinkedClientDTO with the released key

        Raises:
            ConsumerKeyUnspecifiedError: If consumer key is blank
            ClientNotFoundError: If the consumer has no active attachment
        """
        if not command.consumer_key or not command.consumer_key.strip():
            raise ConsumerKeyUnspecifiedError()

        found = await self.corporation_repository.find_active_attachment(command.consumer_key)
        if not found:
            raise ClientNotFoundError()
        corporation, _ = found

        disabled = await self.corporation_repository.disable_active_attachment(
            command.consumer_key, timezone.now()
        )
        if not disabled:
            raise ClientNotFoundError()

        # The attachment is already disabled; a failed release is logged only
        await self.attachment_service.compensate(disabled.license_key)

        logger.info(
            "Consumer %s unlinked from corporation %s",
            disabled.consumer_key,
            corporation.code,
            extra={"attachment_id": str(disabled.id)},
        )

        await CorporationCacheService.invalidate(corporation.code)
        await event_bus.publish(
            ClientUnlinked(
                attachment_id=disabled.id,
                corporation_id=disabled.corporation_id,
                consumer_key=disabled.consumer_key,
                license_key=disabled.license_key,
            )
        )

        return UnlinkedClientDTO(
            consumer_key=disabled.consumer_key,
            license_key=disabled.license_key,
            unlink_date=disabled.unlink_date,
        )
