"""
Django model discovery for the corporations app.

The models live in corporations.infrastructure.models; importing them
here gives the app a models module so the schema is created.
"""

from corporations.infrastructure.models import (  # noqa: F401
    ClientAttachment,
    Corporation,
    EntitlementPeriod,
)
