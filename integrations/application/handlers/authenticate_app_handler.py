"""
App authentication handlers.

Registration of apps and exchange of app credentials for sessions.
"""

import logging
import uuid
from typing import Optional

from django.utils import timezone

from core.domain.exceptions import AppNotFoundError
from integrations.application.commands.authenticate_app import AuthenticateAppCommand
from integrations.application.commands.register_app import RegisterAppCommand
from integrations.application.dto.session_dto import RegisteredAppDTO, SessionDTO
from integrations.application.services.session_token_service import SessionTokenService
from integrations.domain.registered_app import RegisteredApp
from integrations.ports.registered_app_repository import RegisteredAppRepository

logger = logging.getLogger(__name__)


class AuthenticateAppHandler:
    """Handler for AuthenticateAppCommand."""

    def __init__(
        self,
        app_repository: RegisteredAppRepository,
        session_service: Optional[SessionTokenService] = None,
    ):
        """Initialize handler with repositories."""
        self.app_repository = app_repository
        self.session_service = session_service or SessionTokenService()

    async def handle(self, command: AuthenticateAppCommand) -> SessionDTO:
        """
        Handle authenticate app command.

        Unknown ids and wrong keys are reported identically.

        Args:
            command: AuthenticateAppCommand

        Returns:
            SessionDTO with the signed token and its expiry

        Raises:
            AppNotFoundError: If the id is unknown or the key does not match
        """
        try:
            app_id = uuid.UUID(str(command.app_id))
        except ValueError as e:
            raise AppNotFoundError() from e

        app = await self.app_repository.find_by_id(app_id)
        if not app or not app.verify_key(command.app_key):
            logger.warning("Failed authentication for app %s", command.app_id)
            raise AppNotFoundError()

        now = timezone.now()
        token, expires_at = self.session_service.issue(app.id, app.is_admin, now)
        await self.app_repository.touch(app.id, now)

        logger.info("App %s authenticated", app.name, extra={"app_id": str(app.id)})
        return SessionDTO(token=token, expires_at=expires_at)


class RegisterAppHandler:
    """Handler for RegisterAppCommand."""

    def __init__(self, app_repository: RegisteredAppRepository):
        """Initialize handler with repositories."""
        self.app_repository = app_repository

    async def handle(self, command: RegisterAppCommand) -> RegisteredAppDTO:
        """
        Handle register app command.

        Args:
            command: RegisterAppCommand

        Returns:
            RegisteredAppDTO including the raw key, shown only once
        """
        app, raw_key = RegisteredApp.register(command.name, is_admin=command.is_admin)
        saved = await self.app_repository.save(app)

        logger.info("Registered app %s (admin=%s)", saved.name, saved.is_admin)
        return RegisteredAppDTO(
            id=saved.id,
            name=saved.name,
            is_admin=saved.is_admin,
            raw_key=raw_key,
        )
