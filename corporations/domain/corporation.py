"""
Corporation domain entity.

The corporation is the aggregate root owning client attachments.
Loaded corporations carry only their active attachments; disabled
history is reached through the repository's continuity lookup.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Tuple

from core.domain.value_objects import CorporationCode
from corporations.domain.client_attachment import ClientAttachment


@dataclass(frozen=True)
class Corporation:
    """
    Corporation domain entity.

    Transitions return new instances.
    """

    id: uuid.UUID
    code: str
    description: str
    town: str
    city: str
    banned: bool
    attachments: Tuple[ClientAttachment, ...]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate corporation entity."""
        object.__setattr__(self, "code", str(CorporationCode(self.code)))
        if len(self.code) > 100:
            raise ValueError("Corporation code too long")

    @classmethod
    def create(
        cls,
        code: str,
        description: str = "",
        town: str = "",
        city: str = "",
        corporation_id: Optional[uuid.UUID] = None,
    ) -> "Corporation":
        """
        Create a new Corporation entity.

        Args:
            code: Unique human identifier
            description: Free text description
            town: Town name
            city: City name
            corporation_id: Optional UUID (generated if not provided)

        Returns:
            Corporation entity instance

        Raises:
            CodeUnspecifiedError: If code is missing or blank
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=corporation_id or uuid.uuid4(),
            code=code,
            description=description or "",
            town=town or "",
            city=city or "",
            banned=False,
            attachments=(),
            created_at=now,
            updated_at=now,
        )

    @property
    def active_attachments(self) -> Tuple[ClientAttachment, ...]:
        """Attachments that are not disabled."""
        return tuple(attachment for attachment in self.attachments if attachment.is_active)

    @property
    def active_clients(self) -> int:
        """Number of active attachments."""
        return len(self.active_attachments)

    @property
    def is_available(self) -> bool:
        """A banned corporation accepts no new clients."""
        return not self.banned

    def find_active_attachment(self, consumer_key: str) -> Optional[ClientAttachment]:
        """Return the consumer's active attachment in this corporation, if any."""
        for attachment in self.attachments:
            if attachment.is_active and attachment.consumer_key == consumer_key:
                return attachment
        return None

    def attach(self, attachment: ClientAttachment) -> "Corporation":
        """
        Return a copy with a new active attachment.

        Raises:
            ValueError: If the attachment belongs elsewhere or the consumer is already active here
        """
        if attachment.corporation_id != self.id:
            raise ValueError("Attachment belongs to another corporation")
        if self.find_active_attachment(attachment.consumer_key):
            raise ValueError("Consumer already has an active attachment")
        return replace(self, attachments=self.attachments + (attachment,))

    def update_profile(
        self,
        code: Optional[str] = None,
        description: Optional[str] = None,
        town: Optional[str] = None,
        city: Optional[str] = None,
        banned: Optional[bool] = None,
    ) -> "Corporation":
        """
        Return a copy with the given profile fields changed.

        None leaves a field untouched.
        """
        return replace(
            self,
            code=self.code if code is None else code,
            description=self.description if description is None else description,
            town=self.town if town is None else town,
            city=self.city if city is None else city,
            banned=self.banned if banned is None else banned,
            updated_at=datetime.now(timezone.utc),
        )
