"""
Celery tasks for background processing.

Tasks for webhook delivery and the periodic expired license cleanup.
"""
import logging

from asgiref.sync import async_to_sync

from LicenseExpiryService.celery import app

logger = logging.getLogger(__name__)


@app.task
def deliver_webhook_task(webhook_event_id: str) -> bool:
    """
    Celery task for webhook delivery.

    Makes a single attempt; the outcome is stored on the WebhookEvent.

    Args:
        webhook_event_id: WebhookEvent UUID
    """
    from core.infrastructure.webhooks import WebhookDeliveryService
    from teams.infrastructure.models import WebhookEvent

    try:
        webhook_event = WebhookEvent.objects.select_related("webhook").get(id=webhook_event_id)
    except WebhookEvent.DoesNotExist:
        logger.warning("Webhook event %s no longer exists", webhook_event_id)
        return False

    return WebhookDeliveryService.deliver(webhook_event)


@app.task
def cleanup_expired_licenses_task(dry_run: bool = False) -> dict:
    """
    Celery task for the expired license cleanup.

    Returns:
        Cleanup summary as a dict
    """
    from licenses.application.services.cleanup import ExpiredLicenseCleanupService
    from licenses.infrastructure.repositories.django_license_repository import (
        DjangoLicenseRepository,
    )
    from teams.infrastructure.repositories.django_team_repository import DjangoTeamRepository

    service = ExpiredLicenseCleanupService(
        team_repository=DjangoTeamRepository(),
        license_repository=DjangoLicenseRepository(),
    )
    summary = async_to_sync(service.run)(dry_run=dry_run)
    return summary.to_dict()
