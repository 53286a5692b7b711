"""
Corporation domain events.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from core.domain.events import DomainEvent


class CorporationCreated(DomainEvent):
    """Event raised when a corporation is created."""

    def __init__(
        self,
        corporation_id: uuid.UUID,
        code: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize CorporationCreated event.

        Args:
            corporation_id: Corporation UUID
            code: Corporation code
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(corporation_id),
            event_type="CorporationCreated",
        )
        self.corporation_id = corporation_id
        self.code = code


class CorporationUpdated(DomainEvent):
    """Event raised when a corporation profile changes."""

    def __init__(
        self,
        corporation_id: uuid.UUID,
        code: str,
        changed_fields: List[str],
        previous_code: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize CorporationUpdated event.

        Args:
            corporation_id: Corporation UUID
            code: Corporation code after the update
            changed_fields: Names of the fields that changed
            previous_code: Code before the update, when it changed
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(corporation_id),
            event_type="CorporationUpdated",
        )
        self.corporation_id = corporation_id
        self.code = code
        self.changed_fields = ",".join(changed_fields)
        self.previous_code = previous_code
