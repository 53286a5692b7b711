"""
Attachment persistence with license compensation.

A demo grant or link flags a license key used before the attachment
row exists. The two writes are not covered by one transaction, so a
failed attachment write must hand the key back to the inventory.
"""

import logging

from core.infrastructure.events import event_bus
from corporations.domain.client_attachment import ClientAttachment
from corporations.ports.corporation_repository import CorporationRepository
from licenses.domain.events import LicenseKeyReleased
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class AttachmentService:
    """Application service persisting attachments for acquired keys."""

    def __init__(
        self,
        corporation_repository: CorporationRepository,
        license_key_repository: LicenseKeyRepository,
    ):
        """Initialize service with repositories."""
        self.corporation_repository = corporation_repository
        self.license_key_repository = license_key_repository

    async def attach_or_release(self, attachment: ClientAttachment) -> ClientAttachment:
        """
        Persist an attachment whose license key is already flagged used.

        On any failure the key is released and the original error
        propagates unchanged.

        Args:
            attachment: New active attachment

        Returns:
            Saved attachment
        """
        try:
            return await self.corporation_repository.add_attachment(attachment)
        except Exception:
            logger.warning(
                "Attachment for consumer %s failed, releasing license key %s...",
                attachment.consumer_key,
                attachment.license_key[:8],
            )
            await self.compensate(attachment.license_key)
            raise

    async def release(self, license_key: str) -> None:
        """Return a key to the inventory and announce it."""
        await self.license_key_repository.release(license_key)
        await event_bus.publish(LicenseKeyReleased(key=license_key))

    async def compensate(self, license_key: str) -> None:
        """
        Release a key whose attachment is gone or was never written.

        A failure here is logged, not raised: the key stays flagged used
        until ``release_license_key`` frees it.
        """
        try:
            await self.release(license_key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Release of license key %s... failed, key stays used: %s",
                license_key[:8],
                e,
                exc_info=True,
            )
