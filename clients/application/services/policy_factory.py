"""
Policy factory.

Builds domain policies from Django settings.
"""

from django.conf import settings

from clients.domain.services import (
    DEMO_DURATION_DAYS,
    LICENSE_DURATION_DAYS,
    TOKEN_TTL_MINUTES,
    ClientTokenPolicy,
    EntitlementPolicy,
)


def entitlement_policy_from_settings() -> EntitlementPolicy:
    """Entitlement policy using LICENSE_DEMO_DAYS and LICENSE_TERM_DAYS."""
    return EntitlementPolicy(
        demo_days=getattr(settings, "LICENSE_DEMO_DAYS", DEMO_DURATION_DAYS),
        license_days=getattr(settings, "LICENSE_TERM_DAYS", LICENSE_DURATION_DAYS),
    )


def client_token_policy_from_settings() -> ClientTokenPolicy:
    """Token policy using CLIENT_TOKEN_TTL_MINUTES."""
    return ClientTokenPolicy(
        ttl_minutes=getattr(settings, "CLIENT_TOKEN_TTL_MINUTES", TOKEN_TTL_MINUTES),
    )
