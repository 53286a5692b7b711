"""
Corporation repository port (interface).

This defines the contract for the corporation aggregate and the
client attachments it owns. Implementations are in the
infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Tuple

from corporations.domain.client_attachment import ClientAttachment
from corporations.domain.corporation import Corporation

CorporationWithAttachment = Tuple[Corporation, ClientAttachment]


class CorporationRepository(ABC):
    """
    Abstract repository for Corporation aggregates.

    Loaded corporations carry their active attachments only.
    """

    @abstractmethod
    async def save(self, corporation: Corporation) -> Corporation:
        """
        Insert or update the corporation profile.

        Args:
            corporation: Corporation entity to save

        Returns:
            Saved corporation entity

        Raises:
            CodeAlreadyUsedError: If another corporation holds the code
        """
        pass

    @abstractmethod
    async def find_by_id(self, corporation_id: uuid.UUID) -> Optional[Corporation]:
        """
        Find a corporation by ID.

        Args:
            corporation_id: Corporation UUID

        Returns:
            Corporation entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[Corporation]:
        """
        Find a corporation by code.

        Args:
            code: Corporation code

        Returns:
            Corporation entity or None if not found
        """
        pass

    @abstractmethod
    async def code_exists(self, code: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """
        Check whether a code is taken.

        Args:
            code: Corporation code
            exclude_id: Corporation to ignore (the one being updated)

        Returns:
            True if another corporation holds the code
        """
        pass

    @abstractmethod
    async def find_active_attachment(
        self, consumer_key: str
    ) -> Optional[CorporationWithAttachment]:
        """
        Find the consumer's active attachment across all corporations.

        Args:
            consumer_key: External client identifier

        Returns:
            (Corporation, ClientAttachment) or None if the consumer is not linked
        """
        pass

    @abstractmethod
    async def has_any_attachment(self, consumer_key: str) -> bool:
        """Check whether the consumer was ever attached, active or disabled."""
        pass

    @abstractmethod
    async def add_attachment(self, attachment: ClientAttachment) -> ClientAttachment:
        """
        Persist a new active attachment with its periods.

        Args:
            attachment: ClientAttachment to insert

        Returns:
            Saved attachment

        Raises:
            ClientAlreadyLinkedError: If the consumer already has an active attachment
        """
        pass

    @abstractmethod
    async def disable_active_attachment(
        self, consumer_key: str, unlink_date: datetime
    ) -> Optional[ClientAttachment]:
        """
        Atomically disable the consumer's active attachment.

        Args:
            consumer_key: External client identifier
            unlink_date: Timestamp recorded on the attachment

        Returns:
            The disabled attachment, or None if none was active
        """
        pass

    @abstractmethod
    async def find_latest_unlinked(
        self, corporation_id: uuid.UUID, license_key: str
    ) -> Optional[ClientAttachment]:
        """
        Find the most recently unlinked attachment carrying a license key.

        Args:
            corporation_id: Corporation to search
            license_key: License key string

        Returns:
            The attachment with the latest unlink date, or None
        """
        pass

    @abstractmethod
    async def set_token(
        self,
        attachment_id: uuid.UUID,
        token: str,
        given_date: datetime,
        end_date: datetime,
    ) -> bool:
        """
        Store a token on an active attachment, replacing any previous one.

        Args:
            attachment_id: Attachment UUID
            token: Opaque token
            given_date: Issue timestamp
            end_date: Expiry timestamp

        Returns:
            True if an active attachment was updated
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[CorporationWithAttachment]:
        """
        Find the active attachment holding a token.

        Args:
            token: Opaque token

        Returns:
            (Corporation, ClientAttachment) or None if no active attachment holds it
        """
        pass

    @abstractmethod
    async def clear_expired_tokens(self, now: datetime) -> int:
        """
        Remove tokens whose expiry has passed.

        Args:
            now: Reference timestamp

        Returns:
            Number of attachments cleared
        """
        pass
