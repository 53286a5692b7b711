"""
License inventory domain events.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from core.domain.events import DomainEvent


class LicenseKeysGenerated(DomainEvent):
    """Event raised when a batch of keys is added to the inventory."""

    def __init__(
        self,
        count: int,
        prefix: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseKeysGenerated event.

        Args:
            count: Number of keys created
            prefix: Key prefix used
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=prefix,
            event_type="LicenseKeysGenerated",
        )
        self.count = count
        self.prefix = prefix


class LicenseKeysExhausted(DomainEvent):
    """Event raised when a demo grant finds no free key."""

    def __init__(
        self,
        consumer_key: str,
        corporation_code: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseKeysExhausted event.

        Args:
            consumer_key: Consumer that asked for the key
            corporation_code: Corporation the consumer targeted
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=corporation_code,
            event_type="LicenseKeysExhausted",
        )
        self.consumer_key = consumer_key
        self.corporation_code = corporation_code


class LicenseKeyReleased(DomainEvent):
    """Event raised when a key is returned to the free pool."""

    def __init__(
        self,
        key: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseKeyReleased event.

        Args:
            key: License key string
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=key,
            event_type="LicenseKeyReleased",
        )
        self.key = key
