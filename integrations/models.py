"""
Django model discovery for the integrations app.
"""

from integrations.infrastructure.models import RegisteredApp  # noqa: F401
