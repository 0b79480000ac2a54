"""
Webhook delivery service.

Handles signed webhook delivery and records the outcome of each attempt.
"""
import hashlib
import hmac
import json
import logging

import requests
from django.conf import settings
from django.utils import timezone

from core.domain.value_objects import WebhookDeliveryStatus
from core.metrics import webhook_deliveries_total
from teams.infrastructure.models import WebhookEvent

logger = logging.getLogger(__name__)

USER_AGENT = "License-Expiry-Service-Webhook/1.0"


class WebhookDeliveryService:
    """Service for delivering webhooks to team systems."""

    @staticmethod
    def generate_signature(payload: str, secret: str) -> str:
        """
        Generate HMAC signature for webhook payload.

        Args:
            payload: JSON string payload
            secret: Webhook secret

        Returns:
            HMAC SHA-256 signature (hex)
        """
        return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()

    @staticmethod
    def verify_signature(payload: str, signature: str, secret: str) -> bool:
        """
        Verify webhook signature.

        Args:
            payload: JSON string payload
            signature: Expected signature
            secret: Webhook secret

        Returns:
            True if signature is valid
        """
        expected_signature = WebhookDeliveryService.generate_signature(payload, secret)
        return hmac.compare_digest(expected_signature, signature)

    @staticmethod
    def build_body(webhook_event: WebhookEvent) -> str:
        """Serialize the request body for a delivery."""
        return json.dumps(
            {
                "event": webhook_event.event_type,
                "timestamp": timezone.now().isoformat(),
                "data": webhook_event.payload,
            },
            sort_keys=True,
        )

    @staticmethod
    def deliver(webhook_event: WebhookEvent) -> bool:
        """
        Make one delivery attempt and record its outcome.

        Args:
            webhook_event: Pending or failed delivery

        Returns:
            True if the endpoint answered with a 2xx status
        """
        webhook_config = webhook_event.webhook
        body = WebhookDeliveryService.build_body(webhook_event)
        headers = {
            "Content-Type": "application/json",
            "X-Webhook-Signature": WebhookDeliveryService.generate_signature(
                body, webhook_config.secret
            ),
            "X-Webhook-Event": webhook_event.event_type,
            "User-Agent": USER_AGENT,
        }
        timeout = webhook_config.timeout_seconds or getattr(settings, "WEBHOOK_TIMEOUT_SECONDS", 10)

        webhook_event.attempts += 1
        webhook_event.last_attempt_at = timezone.now()
        try:
            response = requests.post(
                webhook_config.url,
                data=body,
                headers=headers,
                timeout=timeout,
            )
            webhook_event.response_status = response.status_code
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            webhook_event.status = WebhookDeliveryStatus.FAILED.value
            webhook_event.error = str(e)
            logger.warning(
                "Webhook delivery failed: %s - %s - %s",
                webhook_config.id,
                webhook_event.event_type,
                e,
            )
        else:
            webhook_event.status = WebhookDeliveryStatus.DELIVERED.value
            webhook_event.error = ""
            logger.info(
                "Webhook delivered successfully: %s - %s",
                webhook_config.id,
                webhook_event.event_type,
            )

        webhook_event.save(
            update_fields=["status", "attempts", "last_attempt_at", "response_status", "error"]
        )
        webhook_deliveries_total.labels(status=webhook_event.status).inc()
        return webhook_event.status == WebhookDeliveryStatus.DELIVERED.value
