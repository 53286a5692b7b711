"""
Client token handlers.

Issue, validate and use the short-lived tokens that authenticate
client-initiated calls.
"""

import logging
from typing import Optional

from django.utils import timezone

from clients.application.commands.issue_client_token import IssueClientTokenCommand
from clients.application.commands.update_client_via_token import UpdateClientViaTokenCommand
from clients.application.dto.client_dto import ClientStatusDTO, ClientTokenDTO
from clients.application.queries.validate_client_token import ValidateClientTokenQuery
from clients.application.services.policy_factory import client_token_policy_from_settings
from clients.domain.events import ClientTokenIssued
from clients.domain.services import ClientTokenPolicy
from core.domain.exceptions import ClientNotFoundError, TokenNotFoundError
from core.infrastructure.events import event_bus
from corporations.application.commands.update_corporation import UpdateCorporationCommand
from corporations.application.dto.corporation_dto import CorporationDTO
from corporations.application.handlers.update_corporation_handler import (
    UpdateCorporationHandler,
)
from corporations.ports.corporation_repository import CorporationRepository

logger = logging.getLogger(__name__)


class IssueClientTokenHandler:
    """Handler for IssueClientTokenCommand."""

    def __init__(
        self,
        corporation_repository: CorporationRepository,
        token_policy: Optional[ClientTokenPolicy] = None,
    ):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository
        self.token_policy = token_policy or client_token_policy_from_settings()

    async def handle(self, command: IssueClientTokenCommand) -> ClientTokenDTO:
        """
        Handle issue client token command.

        Any token previously held by the attachment stops working.

        Args:
            command: IssueClientTokenCommand

        Returns:
            ClientTokenDTO with the token and its lifetime

        Raises:
            ClientNotFoundError: If the consumer is not linked, its period
                has ended or its corporation is banned
        """
        if not command.consumer_key:
            raise ClientNotFoundError()

        found = await self.corporation_repository.find_active_attachment(command.consumer_key)
        if not found:
            raise ClientNotFoundError()

        corporation, attachment = found
        now = timezone.now()
        if corporation.banned or not attachment.is_entitled(now):
            raise ClientNotFoundError()

        token = self.token_policy.generate()
        issued = attachment.with_token(token, now, self.token_policy.expiry(now))

        stored = await self.corporation_repository.set_token(
            issued.id, issued.token, issued.token_given_date, issued.token_end_date
        )
        if not stored:
            raise ClientNotFoundError()

        logger.info("Token issued to consumer %s", issued.consumer_key)
        await event_bus.publish(
            ClientTokenIssued(
                attachment_id=issued.id,
                consumer_key=issued.consumer_key,
                expires_at=issued.token_end_date,
            )
        )

        return ClientTokenDTO(
            token=issued.token,
            given_at=issued.token_given_date,
            expires_at=issued.token_end_date,
        )


class ValidateClientTokenHandler:
    """Handler for ValidateClientTokenQuery."""

    def __init__(self, corporation_repository: CorporationRepository):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository

    async def handle(self, query: ValidateClientTokenQuery) -> ClientStatusDTO:
        """
        Handle validate client token query.

        The token stays valid until its expiry; validation does not
        consume or rotate it.

        Args:
            query: ValidateClientTokenQuery

        Returns:
            ClientStatusDTO of the token holder

        Raises:
            TokenNotFoundError: If no active attachment holds an unexpired token
        """
        if not query.token:
            raise TokenNotFoundError()

        found = await self.corporation_repository.find_by_token(query.token)
        if not found:
            raise TokenNotFoundError()

        corporation, attachment = found
        now = timezone.now()
        if not attachment.has_valid_token(query.token, now):
            raise TokenNotFoundError()

        return ClientStatusDTO.from_entities(corporation, attachment, now)


class UpdateClientViaTokenHandler:
    """Handler for UpdateClientViaTokenCommand."""

    def __init__(self, corporation_repository: CorporationRepository):
        """Initialize handler with repositories."""
        self.corporation_repository = corporation_repository

    async def handle(self, command: UpdateClientViaTokenCommand) -> CorporationDTO:
        """
        Handle update client via token command.

        Args:
            command: UpdateClientViaTokenCommand

        Returns:
            CorporationDTO after the update

        Raises:
            TokenNotFoundError: If the token is not valid
            AuthorizationError: If the changes include the banned flag
            CodeAlreadyUsedError: If the new code belongs to another corporation
        """
        status = await ValidateClientTokenHandler(self.corporation_repository).handle(
            ValidateClientTokenQuery(token=command.token)
        )

        try:
            return await UpdateCorporationHandler(self.corporation_repository).handle(
                UpdateCorporationCommand(
                    changes=command.changes,
                    consumer_key=status.consumer_key,
                )
            )
        except ClientNotFoundError as e:
            # The attachment was unlinked between validation and update.
            raise TokenNotFoundError() from e
