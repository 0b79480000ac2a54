"""
Webhook event handler.

Queues webhook deliveries when domain events occur.
"""

import logging
from functools import partial
from typing import List

from asgiref.sync import sync_to_async
from django.db import transaction

from core.domain.events import DomainEvent, EventHandler

logger = logging.getLogger(__name__)


class WebhookEventHandler(EventHandler):
    """
    Event handler for webhook delivery.

    Creates a pending WebhookEvent for every active webhook of the event's
    team that subscribes to it, and hands each one to Celery once the
    surrounding transaction commits.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for webhook delivery.

        Args:
            event: Domain event to deliver via webhook
        """
        if not event.webhook_name:
            logger.debug("No webhook mapping for event type: %s", event.event_type)
            return

        if event.team_id is None:
            logger.warning("Event %s has no team_id, skipping webhook", event.event_type)
            return

        delivery_ids = await self._queue(event)
        if not delivery_ids:
            return

        logger.info(
            "Queued %d webhook deliveries for %s",
            len(delivery_ids),
            event.webhook_name,
            extra={"event_id": str(event.event_id), "team_id": str(event.team_id)},
        )

    @sync_to_async
    def _queue(self, event: DomainEvent) -> List[str]:
        from core.tasks import deliver_webhook_task
        from teams.infrastructure.models import WebhookConfig, WebhookEvent

        payload = {
            "event_id": str(event.event_id),
            "occurred_at": event.occurred_at.isoformat(),
            "data": event.payload(),
        }

        delivery_ids = []
        for webhook in WebhookConfig.objects.filter(team_id=event.team_id, is_active=True):
            if not webhook.subscribes_to(event.webhook_name):
                continue
            delivery = WebhookEvent.objects.create(
                webhook=webhook,
                event_type=event.webhook_name,
                payload=payload,
            )
            transaction.on_commit(partial(deliver_webhook_task.delay, str(delivery.id)))
            delivery_ids.append(str(delivery.id))
        return delivery_ids
