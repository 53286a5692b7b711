"""
Client domain services.

Policies for entitlement periods and client tokens. They hold no
state beyond their configuration and never touch storage.
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from core.domain.value_objects import EntitlementPeriod
from corporations.domain.client_attachment import ClientAttachment

DEMO_DURATION_DAYS = 30
LICENSE_DURATION_DAYS = 365
TOKEN_TTL_MINUTES = 20


class EntitlementPolicy:
    """Domain service computing the period of a new attachment."""

    def __init__(
        self,
        demo_days: int = DEMO_DURATION_DAYS,
        license_days: int = LICENSE_DURATION_DAYS,
    ):
        """Initialize policy with window lengths in days."""
        if demo_days < 1 or license_days < 1:
            raise ValueError("Entitlement windows must be at least one day")
        self.demo_days = demo_days
        self.license_days = license_days

    def demo_period(self, now: datetime) -> EntitlementPeriod:
        """
        Period for a demo grant.

        Args:
            now: Grant timestamp

        Returns:
            Demo EntitlementPeriod starting now
        """
        return EntitlementPeriod.starting(now, self.demo_days, is_demo=True)

    def license_period(
        self, now: datetime, previous: Optional[ClientAttachment] = None
    ) -> EntitlementPeriod:
        """
        Period for a paid link.

        When the same license key was previously unlinked from this
        corporation, the last period of that attachment is resumed
        verbatim so unlink and relink never restart the clock.

        Args:
            now: Link timestamp
            previous: Most recently unlinked attachment carrying the key

        Returns:
            Paid EntitlementPeriod
        """
        prior_period = previous.current_period if previous else None
        if prior_period is not None:
            return EntitlementPeriod(
                begin_date=prior_period.begin_date,
                end_date=prior_period.end_date,
                is_demo=False,
            )
        return EntitlementPeriod.starting(now, self.license_days, is_demo=False)


class ClientTokenPolicy:
    """Domain service issuing short-lived client tokens."""

    def __init__(self, ttl_minutes: int = TOKEN_TTL_MINUTES):
        """Initialize policy with token lifetime in minutes."""
        if ttl_minutes < 1:
            raise ValueError("Token lifetime must be at least one minute")
        self.ttl = timedelta(minutes=ttl_minutes)

    @staticmethod
    def generate() -> str:
        """Return a random 128-bit token as 32 hex characters."""
        return uuid.uuid4().hex

    def expiry(self, given_date: datetime) -> datetime:
        """Expiry of a token issued at given_date."""
        return given_date + self.ttl
