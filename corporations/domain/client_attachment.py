"""
ClientAttachment domain entity.

An attachment is a consumer's link to a corporation. It carries the
license key the consumer holds, the append-only sequence of
entitlement periods and the consumer's current access token.
Unlinking disables the attachment instead of deleting it so later
links can find the history.
"""

import secrets
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Tuple

from core.domain.value_objects import EntitlementPeriod


@dataclass(frozen=True)
class ClientAttachment:
    """
    ClientAttachment domain entity.

    Transitions return new instances.
    """

    id: uuid.UUID
    corporation_id: uuid.UUID
    consumer_key: str
    license_key: str
    disabled: bool
    unlink_date: Optional[datetime]
    token: Optional[str]
    token_given_date: Optional[datetime]
    token_end_date: Optional[datetime]
    periods: Tuple[EntitlementPeriod, ...]
    created_at: datetime

    def __post_init__(self):
        """Validate attachment entity."""
        if not self.consumer_key or not self.consumer_key.strip():
            raise ValueError("Consumer key cannot be empty")
        if not self.license_key:
            raise ValueError("License key is required")
        if not self.corporation_id:
            raise ValueError("Corporation ID is required")
        if self.disabled and self.unlink_date is None:
            raise ValueError("Disabled attachment requires an unlink date")

    @classmethod
    def create(
        cls,
        corporation_id: uuid.UUID,
        consumer_key: str,
        license_key: str,
        period: EntitlementPeriod,
        now: Optional[datetime] = None,
        attachment_id: Optional[uuid.UUID] = None,
    ) -> "ClientAttachment":
        """
        Create a new active attachment holding one period.

        Args:
            corporation_id: Owning corporation UUID
            consumer_key: External client identifier
            license_key: Key acquired from the inventory
            period: Initial entitlement period
            now: Creation timestamp
            attachment_id: Optional UUID (generated if not provided)

        Returns:
            ClientAttachment entity instance
        """
        return cls(
            id=attachment_id or uuid.uuid4(),
            corporation_id=corporation_id,
            consumer_key=consumer_key,
            license_key=license_key,
            disabled=False,
            unlink_date=None,
            token=None,
            token_given_date=None,
            token_end_date=None,
            periods=(period,),
            created_at=now or datetime.now(timezone.utc),
        )

    @property
    def is_active(self) -> bool:
        """An attachment is active until it is unlinked."""
        return not self.disabled

    @property
    def current_period(self) -> Optional[EntitlementPeriod]:
        """The last period governs access."""
        return self.periods[-1] if self.periods else None

    def is_entitled(self, now: Optional[datetime] = None) -> bool:
        """Check the attachment is active and its current period is open."""
        period = self.current_period
        return self.is_active and period is not None and not period.is_expired(now)

    def append_period(self, period: EntitlementPeriod) -> "ClientAttachment":
        """Return a copy with one more period."""
        return replace(self, periods=self.periods + (period,))

    def unlink(self, now: Optional[datetime] = None) -> "ClientAttachment":
        """
        Return a disabled copy stamped with the unlink date.

        Unlinking an already disabled attachment keeps its original date.
        """
        if self.disabled:
            return self
        return replace(
            self,
            disabled=True,
            unlink_date=now or datetime.now(timezone.utc),
        )

    def with_token(
        self, token: str, given_date: datetime, end_date: datetime
    ) -> "ClientAttachment":
        """Return a copy holding a new token; the previous one is dropped."""
        if end_date <= given_date:
            raise ValueError("Token must expire after it is issued")
        return replace(
            self,
            token=token,
            token_given_date=given_date,
            token_end_date=end_date,
        )

    def has_valid_token(self, token: str, now: Optional[datetime] = None) -> bool:
        """
        Check a presented token against the stored one.

        Expiry is exclusive: the token stops working at token_end_date.
        """
        if self.disabled or not self.token or not token or self.token_end_date is None:
            return False
        now = now or datetime.now(timezone.utc)
        return secrets.compare_digest(self.token, token) and now < self.token_end_date
