"""
Django management command to clear expired client tokens.

Expired tokens are already rejected on validation; this command only
removes them from storage. Run it periodically (e.g., via cron).
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand
from django.utils import timezone

from corporations.infrastructure.models import ClientAttachment as ClientAttachmentModel
from corporations.infrastructure.repositories.django_corporation_repository import (
    DjangoCorporationRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to clear expired client tokens."""

    help = "Clear expired client tokens"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't actually clear tokens",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        now = timezone.now()

        if options["dry_run"]:
            # pylint: disable=no-member
            expired = ClientAttachmentModel.objects.filter(
                token__isnull=False, token_end_date__lte=now
            )
            self.stdout.write(f"Found {expired.count()} expired token(s)")
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            return

        cleared = async_to_sync(DjangoCorporationRepository().clear_expired_tokens)(now)
        logger.info("Cleared %s expired client token(s)", cleared)
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Cleared {cleared} expired token(s)"))
