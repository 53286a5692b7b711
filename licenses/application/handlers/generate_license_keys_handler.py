"""
GenerateLicenseKeysHandler.

Handles bulk creation of free license keys.
"""

import logging

from core.infrastructure.events import event_bus
from licenses.application.commands.generate_license_keys import GenerateLicenseKeysCommand
from licenses.application.dto.license_key_dto import GeneratedLicenseKeysDTO, InventoryDTO
from licenses.domain.events import LicenseKeysGenerated
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class GenerateLicenseKeysHandler:
    """Handler for GenerateLicenseKeysCommand."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repositories."""
        self.license_key_repository = license_key_repository

    async def handle(self, command: GenerateLicenseKeysCommand) -> GeneratedLicenseKeysDTO:
        """
        Handle generate license keys command.

        Args:
            command: GenerateLicenseKeysCommand

        Returns:
            GeneratedLicenseKeysDTO with the number of keys created

        Raises:
            ValueError: If count is not positive
        """
        if command.count < 1:
            raise ValueError("count must be positive")

        license_keys = [LicenseKey.create(prefix=command.prefix) for _ in range(command.count)]
        created = await self.license_key_repository.save_many(license_keys)

        logger.info("Generated %d license key(s) with prefix %s", created, command.prefix)
        await event_bus.publish(LicenseKeysGenerated(count=created, prefix=command.prefix))

        return GeneratedLicenseKeysDTO(
            created=created,
            keys=[license_key.key for license_key in license_keys],
        )


class GetInventoryHandler:
    """Handler for inventory counters."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repositories."""
        self.license_key_repository = license_key_repository

    async def handle(self) -> InventoryDTO:
        """Return free and used key counts."""
        return InventoryDTO(
            free=await self.license_key_repository.count_free(),
            used=await self.license_key_repository.count_used(),
        )
