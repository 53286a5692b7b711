"""
Client domain events.

Events raised as a consumer moves through the attachment lifecycle.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from core.domain.events import DomainEvent


class DemoGranted(DomainEvent):
    """Event raised when a consumer receives a demo license."""

    def __init__(
        self,
        attachment_id: uuid.UUID,
        corporation_id: uuid.UUID,
        consumer_key: str,
        license_key: str,
        end_date: datetime,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize DemoGranted event.

        Args:
            attachment_id: Attachment UUID
            corporation_id: Corporation UUID
            consumer_key: External client identifier
            license_key: Acquired key
            end_date: End of the demo window
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(corporation_id),
            event_type="DemoGranted",
        )
        self.attachment_id = attachment_id
        self.corporation_id = corporation_id
        self.consumer_key = consumer_key
        self.license_key = license_key
        self.end_date = end_date


class ClientLinked(DomainEvent):
    """Event raised when a consumer links with a paid license key."""

    def __init__(
        self,
        attachment_id: uuid.UUID,
        corporation_id: uuid.UUID,
        consumer_key: str,
        license_key: str,
        continued: bool,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize ClientLinked event.

        Args:
            attachment_id: Attachment UUID
            corporation_id: Corporation UUID
            consumer_key: External client identifier
            license_key: Linked key
            continued: Whether a prior period was resumed
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(corporation_id),
            event_type="ClientLinked",
        )
        self.attachment_id = attachment_id
        self.corporation_id = corporation_id
        self.consumer_key = consumer_key
        self.license_key = license_key
        self.continued = continued


class ClientUnlinked(DomainEvent):
    """Event raised when a consumer's attachment is disabled."""

    def __init__(
        self,
        attachment_id: uuid.UUID,
        corporation_id: uuid.UUID,
        consumer_key: str,
        license_key: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize ClientUnlinked event.

        Args:
            attachment_id: Attachment UUID
            corporation_id: Corporation UUID
            consumer_key: External client identifier
            license_key: Released key
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(corporation_id),
            event_type="ClientUnlinked",
        )
        self.attachment_id = attachment_id
        self.corporation_id = corporation_id
        self.consumer_key = consumer_key
        self.license_key = license_key


class ClientTokenIssued(DomainEvent):
    """Event raised when a client token is issued."""

    def __init__(
        self,
        attachment_id: uuid.UUID,
        consumer_key: str,
        expires_at: datetime,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize ClientTokenIssued event.

        Args:
            attachment_id: Attachment UUID
            consumer_key: External client identifier
            expires_at: Token expiry
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(attachment_id),
            event_type="ClientTokenIssued",
        )
        self.attachment_id = attachment_id
        self.consumer_key = consumer_key
        self.expires_at = expires_at
