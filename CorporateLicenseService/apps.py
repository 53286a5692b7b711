"""
App configuration for Corporate License Service.
"""

import logging
import os
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

# Commands that never serve traffic and need no tracing.
SKIP_OBSERVABILITY_COMMANDS = {
    "migrate",
    "makemigrations",
    "collectstatic",
    "shell",
    "check",
    "createsuperuser",
}


class CorporateLicenseServiceConfig(AppConfig):
    """App configuration for CorporateLicenseService."""

    name = "CorporateLicenseService"
    verbose_name = "Corporate License Service"

    def ready(self):
        """Called when Django starts."""
        from core.infrastructure.event_handlers import register_event_handlers

        # Idempotent, so the reloader's second import is harmless.
        register_event_handlers()

        if self._should_setup_observability():
            from core.instrumentation import setup_opentelemetry

            logger.info("Setting up observability...")
            setup_opentelemetry()

    def _should_setup_observability(self) -> bool:
        """Tracing exporters only run in serving processes with observability enabled."""
        if not getattr(settings, "OBSERVABILITY_ENABLED", False):
            return False
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_OBSERVABILITY_COMMANDS:
            return False
        # RUN_MAIN is "false" in the autoreloader's watcher process
        return os.environ.get("RUN_MAIN") != "false"
