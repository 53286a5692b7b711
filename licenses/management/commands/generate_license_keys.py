"""
Django management command to add free keys to the license inventory.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from licenses.application.commands.generate_license_keys import GenerateLicenseKeysCommand
from licenses.application.handlers.generate_license_keys_handler import (
    GenerateLicenseKeysHandler,
    GetInventoryHandler,
)
from licenses.domain.license_key import DEFAULT_KEY_PREFIX
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)


class Command(BaseCommand):
    """Command to bulk-create license keys."""

    help = "Generate free license keys"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("--count", type=int, default=10, help="Number of keys to create")
        parser.add_argument(
            "--prefix",
            default=DEFAULT_KEY_PREFIX,
            help="Key prefix (PREFIX-XXXX-XXXX-XXXX-XXXX)",
        )
        parser.add_argument(
            "--show-keys",
            action="store_true",
            help="Print the generated keys",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        if options["count"] < 1:
            raise CommandError("--count must be positive")

        repository = DjangoLicenseKeyRepository()
        result = async_to_sync(GenerateLicenseKeysHandler(repository).handle)(
            GenerateLicenseKeysCommand(count=options["count"], prefix=options["prefix"])
        )

        if options["show_keys"]:
            for key in result.keys:
                self.stdout.write(f"  {key}")

        inventory = async_to_sync(GetInventoryHandler(repository).handle)()
        # pylint: disable=no-member
        self.stdout.write(
            self.style.SUCCESS(
                f"Created {result.created} license key(s); "
                f"inventory: {inventory.free} free, {inventory.used} used"
            )
        )
