"""
Django management command to free a license key left used without an attachment.

Unlink releases the key after disabling the attachment. If that release
fails the key stays used and is logged; this command returns it to the
inventory.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from corporations.infrastructure.models import ClientAttachment as ClientAttachmentModel
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to release a stranded license key."""

    help = "Return a used license key with no active attachment to the inventory"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("key", help="License key to release")

    def handle(self, *args, **options):
        """Execute the command."""
        key = options["key"]
        repository = DjangoLicenseKeyRepository()

        license_key = async_to_sync(repository.find_by_key)(key)
        if license_key is None:
            raise CommandError(f"License key {key} not found")
        if not license_key.used:
            self.stdout.write(f"License key {key} is already free")
            return

        # pylint: disable=no-member
        if ClientAttachmentModel.objects.filter(license_key=key, disabled=False).exists():
            raise CommandError(f"License key {key} is held by an active attachment")

        async_to_sync(repository.release)(key)
        logger.info("Released stranded license key %s...", key[:8])
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Released license key {key}"))
