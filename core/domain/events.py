"""
Domain events base classes.

Domain events record a state transition that already happened
(a demo granted, a client unlinked, a token issued). Subscribers
use them for side effects such as audit logging and metrics.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Subclasses add their payload as plain attributes after calling
    the base initializer.
    """

    event_id: UUID
    occurred_at: datetime
    aggregate_id: str
    event_type: str

    def __init_subclass__(cls, **kwargs):
        """Automatically set event_type for subclasses."""
        super().__init_subclass__(**kwargs)
        cls.event_type = cls.__name__

    def __post_init__(self):
        """Fill identity and timestamp when omitted."""
        if self.event_id is None:
            object.__setattr__(self, "event_id", uuid4())
        if self.occurred_at is None:
            object.__setattr__(self, "occurred_at", datetime.now(timezone.utc))

    def payload(self) -> Dict[str, Any]:
        """Return subclass attributes that are not part of the envelope."""
        envelope = {"event_id", "occurred_at", "aggregate_id", "event_type"}
        return {
            name: value if isinstance(value, (str, int, float, bool, type(None))) else str(value)
            for name, value in vars(self).items()
            if name not in envelope
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "event_type": self.event_type,
            "payload": self.payload(),
        }


class EventHandler(ABC):
    """Base class for event handlers."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """
        Handle a domain event.

        Args:
            event: The domain event to handle
        """
        pass


class EventBus(ABC):
    """
    Abstract event bus for publishing and subscribing to domain events.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event.

        Args:
            event: The domain event to publish
        """
        pass

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """
        Subscribe to a domain event type.

        Args:
            event_type: The type of event to subscribe to
            handler: The handler to call when event is published
        """
        pass
