"""
Django management command to register an application.

The app key is printed once and cannot be recovered afterwards.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from integrations.application.commands.register_app import RegisterAppCommand
from integrations.application.handlers.authenticate_app_handler import RegisterAppHandler
from integrations.infrastructure.repositories.django_registered_app_repository import (
    DjangoRegisteredAppRepository,
)


class Command(BaseCommand):
    """Command to register an application allowed to call the API."""

    help = "Register an application and print its credentials"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("--name", required=True, help="Application name")
        parser.add_argument(
            "--admin",
            action="store_true",
            help="Grant administrative rights",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            result = async_to_sync(RegisterAppHandler(DjangoRegisteredAppRepository()).handle)(
                RegisterAppCommand(name=options["name"], is_admin=options["admin"])
            )
        except ValueError as e:
            raise CommandError(str(e)) from e

        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Registered app {result.name}"))
        self.stdout.write(f"  app_id:  {result.id}")
        self.stdout.write(f"  app_key: {result.raw_key}")
        self.stdout.write(self.style.WARNING("Save the key - it won't be shown again"))
