"""
Event handlers for domain events.

These handlers process published domain events for side effects:
an audit line per event and the business counters in core.metrics.
"""

import logging

from clients.domain.events import ClientLinked, ClientTokenIssued, ClientUnlinked, DemoGranted
from core.domain.events import DomainEvent, EventHandler
from core.metrics import (
    client_links_total,
    client_tokens_issued_total,
    client_unlinks_total,
    corporations_created_total,
    demo_grants_total,
    license_keys_exhausted_total,
    license_keys_generated_total,
)
from corporations.domain.events import CorporationCreated, CorporationUpdated
from licenses.domain.events import LicenseKeyReleased, LicenseKeysExhausted, LicenseKeysGenerated

logger = logging.getLogger(__name__)

AUDITED_EVENTS = (
    CorporationCreated,
    CorporationUpdated,
    DemoGranted,
    ClientLinked,
    ClientUnlinked,
    ClientTokenIssued,
    LicenseKeysGenerated,
    LicenseKeysExhausted,
    LicenseKeyReleased,
)


class AuditLogEventHandler(EventHandler):
    """Event handler writing one structured audit line per event."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
                "payload": event.payload(),
            },
        )


class BusinessMetricsEventHandler(EventHandler):
    """Event handler bumping Prometheus business counters."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        if isinstance(event, DemoGranted):
            demo_grants_total.inc()
        elif isinstance(event, ClientLinked):
            client_links_total.labels(continued=str(event.continued).lower()).inc()
        elif isinstance(event, ClientUnlinked):
            client_unlinks_total.inc()
        elif isinstance(event, ClientTokenIssued):
            client_tokens_issued_total.inc()
        elif isinstance(event, LicenseKeysExhausted):
            license_keys_exhausted_total.inc()
        elif isinstance(event, LicenseKeysGenerated):
            license_keys_generated_total.inc(event.count)
        elif isinstance(event, CorporationCreated):
            corporations_created_total.inc()


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    if any(
        isinstance(handler, AuditLogEventHandler)
        for handler in event_bus.handlers_for(CorporationCreated)
    ):
        return

    audit_handler = AuditLogEventHandler()
    metrics_handler = BusinessMetricsEventHandler()

    for event_type in AUDITED_EVENTS:
        event_bus.subscribe(event_type, audit_handler)
        event_bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
