"""
Event handlers for domain events.

These handlers process domain events for side effects
like audit logging and webhook notifications.
"""

import logging

from asgiref.sync import sync_to_async

from core.domain.events import DomainEvent, EventHandler
from core.infrastructure.webhook_handler import WebhookEventHandler
from licenses.domain.events import (
    LicenseCreated,
    LicenseDeleted,
    LicenseExpirationStarted,
    LicenseResumed,
    LicenseSuspended,
    LicenseUpdated,
)

logger = logging.getLogger(__name__)

LICENSE_EVENTS = (
    LicenseCreated,
    LicenseUpdated,
    LicenseExpirationStarted,
    LicenseSuspended,
    LicenseResumed,
    LicenseDeleted,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes one AuditLog row per license event.
    """

    ACTIONS = {
        LicenseCreated: "license_created",
        LicenseUpdated: "license_updated",
        LicenseExpirationStarted: "license_expiration_started",
        LicenseSuspended: "license_suspended",
        LicenseResumed: "license_resumed",
        LicenseDeleted: "license_deleted",
    }

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        action = self.ACTIONS.get(type(event))
        if action is None or event.team_id is None:
            logger.debug("No audit action for %s", event.event_type)
            return

        await self._write(event, action)
        logger.info(
            "Audit log: %s - %s",
            action,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )

    @sync_to_async
    def _write(self, event: DomainEvent, action: str) -> None:
        from licenses.infrastructure.models import AuditLog

        AuditLog.objects.create(
            team_id=event.team_id,
            entity_type="license",
            entity_id=event.aggregate_id,
            action=action,
            changes=event.payload(),
        )


audit_handler = AuditLogEventHandler()
webhook_handler = WebhookEventHandler()


def register_event_handlers(bus=None):
    """
    Register all event handlers with the event bus.

    Safe to call more than once; the bus ignores duplicate subscriptions.
    """
    from core.infrastructure.events import event_bus

    bus = bus or event_bus
    for event_class in LICENSE_EVENTS:
        bus.subscribe(event_class, audit_handler)
        bus.subscribe(event_class, webhook_handler)

    logger.info("Event handlers registered")
