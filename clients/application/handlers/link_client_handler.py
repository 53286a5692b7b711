"""
LinkClientHandler.

Handles the link client command, including period continuity for
license keys that were unlinked and are linked again.
"""

import logging
from typing import Optional

from django.utils import timezone

from clients.application.commands.link_client import LinkClientCommand
from clients.application.dto.client_dto import EntitlementDTO
from clients.application.services.attachment_service import AttachmentService
from clients.application.services.policy_factory import entitlement_policy_from_settings
from clients.domain.events import ClientLinked
from clients.domain.services import EntitlementPolicy
from core.domain.exceptions import (
    ClientAlreadyLinkedError,
    ConsumerKeyUnspecifiedError,
    CorporationNotFoundError,
    LicenseKeyNotFoundError,
)
from core.infrastructure.events import event_bus
from corporations.application.services.corporation_cache_service import CorporationCacheService
from corporations.domain.client_attachment import ClientAttachment
from corporations.ports.corporation_repository import CorporationRepository
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class LinkClientHandler:
    """Handler for LinkClientCommand."""

    def __init__(
        self,
        corporation_repository: CorporationRepository,
        license_key_repository: LicenseKeyRepository,
        entitlement_policy: Optional[EntitlementPolicy] = None,
    ):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository
        self.license_key_repository = license_key_repository
        self.entitlement_policy = entitlement_policy or entitlement_policy_from_settings()
        self.attachment_service = AttachmentService(corporation_repository, license_key_repository)

    async def handle(self, command: LinkClientCommand) -> EntitlementDTO:
        """
        Handle link client command.

        Args:
            command: LinkClientCommand

        Returns:
            EntitlementDTO with the granted period

        Raises:
            ConsumerKeyUnspecifiedError: If consumer key is blank
            ClientAlreadyLinkedError: If the consumer already has an active attachment
            CorporationNotFoundError: If corporation is unknown or banned
            LicenseKeyNotFoundError: If the key is absent or already used
        """
        if not command.consumer_key or not command.consumer_key.strip():
            raise ConsumerKeyUnspecifiedError()

        if await self.corporation_repository.find_active_attachment(command.consumer_key):
            raise ClientAlreadyLinkedError()

        corporation = await self.corporation_repository.find_by_code(command.corporation_code)
        if not corporation or not corporation.is_available:
            raise CorporationNotFoundError()

        if not command.license_key:
            raise LicenseKeyNotFoundError()
        license_key = await self.license_key_repository.acquire(command.license_key)
        if not license_key:
            raise LicenseKeyNotFoundError()

        now = timezone.now()
        try:
            previous = await self.corporation_repository.find_latest_unlinked(
                corporation.id, license_key.key
            )
            period = self.entitlement_policy.license_period(now, previous)
            attachment = ClientAttachment.create(
                corporation_id=corporation.id,
                consumer_key=command.consumer_key,
                license_key=license_key.key,
                period=period,
                now=now,
            )
        except Exception:
            await self.attachment_service.compensate(license_key.key)
            raise

        saved = await self.attachment_service.attach_or_release(attachment)

        continued = previous is not None and previous.current_period is not None
        logger.info(
            "Consumer %s linked to corporation %s (continued=%s)",
            saved.consumer_key,
            corporation.code,
            continued,
            extra={"attachment_id": str(saved.id)},
        )

        await CorporationCacheService.invalidate(corporation.code)
        await event_bus.publish(
            ClientLinked(
                attachment_id=saved.id,
                corporation_id=corporation.id,
                consumer_key=saved.consumer_key,
                license_key=saved.license_key,
                continued=continued,
            )
        )

        return EntitlementDTO.from_period(saved.license_key, saved.current_period, now)
