"""
GrantDemoHandler.

Handles the grant demo command.
"""

import logging
from typing import Optional

from django.utils import timezone

from clients.application.commands.grant_demo import GrantDemoCommand
from clients.application.dto.client_dto import EntitlementDTO
from clients.application.services.attachment_service import AttachmentService
from clients.application.services.policy_factory import entitlement_policy_from_settings
from clients.domain.events import DemoGranted
from clients.domain.services import EntitlementPolicy
from core.domain.exceptions import (
    ClientAlreadyLinkedError,
    ClientNotSuitableError,
    ConsumerKeyUnspecifiedError,
    CorporationNotFoundError,
    LicenseKeysOverError,
)
from core.infrastructure.events import event_bus
from corporations.application.services.corporation_cache_service import CorporationCacheService
from corporations.domain.client_attachment import ClientAttachment
from corporations.ports.corporation_repository import CorporationRepository
from licenses.domain.events import LicenseKeysExhausted
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class GrantDemoHandler:
    """Handler for GrantDemoCommand."""

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

    async def handle(self, command: GrantDemoCommand) -> EntitlementDTO:
        """
        Handle grant demo command.

        Args:
            command: GrantDemoCommand

        Returns:
            EntitlementDTO with the demo period

        Raises:
            ConsumerKeyUnspecifiedError: If consumer key is blank
            ClientNotSuitableError: If the consumer has ever been attached
            CorporationNotFoundError: If corporation is unknown or banned
            LicenseKeysOverError: If no free license key remains
        """
        if not command.consumer_key or not command.consumer_key.strip():
            raise ConsumerKeyUnspecifiedError()

        # One demo per consumer, ever
        if await self.corporation_repository.has_any_attachment(command.consumer_key):
            raise ClientNotSuitableError()

        corporation = await self.corporation_repository.find_by_code(command.corporation_code)
        if not corporation or not corporation.is_available:
            raise CorporationNotFoundError()

        license_key = await self.license_key_repository.acquire_free()
        if not license_key:
            logger.warning("License inventory exhausted (corporation %s)", corporation.code)
            await event_bus.publish(
                LicenseKeysExhausted(
                    consumer_key=command.consumer_key,
                    corporation_code=corporation.code,
                )
            )
            raise LicenseKeysOverError()

        now = timezone.now()
        attachment = ClientAttachment.create(
            corporation_id=corporation.id,
            consumer_key=command.consumer_key,
            license_key=license_key.key,
            period=self.entitlement_policy.demo_period(now),
            now=now,
        )

        try:
            saved = await self.attachment_service.attach_or_release(attachment)
        except ClientAlreadyLinkedError as e:
            raise ClientNotSuitableError() from e

        logger.info(
            "Demo granted to consumer %s in corporation %s",
            saved.consumer_key,
            corporation.code,
            extra={"attachment_id": str(saved.id)},
        )

        await CorporationCacheService.invalidate(corporation.code)
        await event_bus.publish(
            DemoGranted(
                attachment_id=saved.id,
                corporation_id=corporation.id,
                consumer_key=saved.consumer_key,
                license_key=saved.license_key,
                end_date=saved.current_period.end_date,
            )
        )

        return EntitlementDTO.from_period(saved.license_key, saved.current_period, now)
