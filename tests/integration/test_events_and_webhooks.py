"""
Integration tests for audit logging and webhook delivery.
"""
import json
from unittest import mock

import pytest
import requests
from asgiref.sync import async_to_sync

from core.domain.value_objects import ExpirationStart, ExpirationType, WebhookDeliveryStatus
from core.infrastructure.event_handlers import register_event_handlers
from core.infrastructure.events import InMemoryEventBus
from core.infrastructure.webhooks import WebhookDeliveryService
from core.tasks import deliver_webhook_task
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.handlers.create_license_handler import CreateLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import SuspendLicenseHandler
from licenses.infrastructure.models import AuditLog
from teams.infrastructure.models import WebhookConfig, WebhookEvent

SECRET = "s3cret"


def ok_response(status_code=200):
    response = mock.Mock(status_code=status_code)
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def bus():
    """Fixture for an event bus with audit and webhook handlers."""
    event_bus = InMemoryEventBus()
    register_event_handlers(event_bus)
    return event_bus


@pytest.fixture
def webhook(db_team):
    """Fixture for a webhook subscribed to creation and suspension."""
    return WebhookConfig.objects.create(
        team=db_team,
        url="https://hooks.example.com/licenses",
        secret=SECRET,
        events=["license.created", "license.suspended"],
    )


@pytest.fixture
def create_handler(bus, django_team_repository, django_license_repository):
    return CreateLicenseHandler(
        team_repository=django_team_repository,
        license_repository=django_license_repository,
        event_bus=bus,
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestAuditLog:
    """Tests for AuditLogEventHandler."""

    def test_create_and_suspend_are_audited(
        self, db_team, bus, create_handler, django_license_repository, now
    ):
        created = async_to_sync(create_handler.handle)(
            CreateLicenseCommand(
                team_id=db_team.id,
                expiration_type=ExpirationType.DURATION,
                expiration_start=ExpirationStart.CREATION,
                expiration_days=30,
            ),
            now=now,
        )
        suspend = SuspendLicenseHandler(django_license_repository, event_bus=bus)
        async_to_sync(suspend.handle)(
            SuspendLicenseCommand(license_id=created.id, team_id=db_team.id), now=now
        )

        entries = AuditLog.objects.filter(entity_id=created.id).order_by("created_at")

        assert sorted(entry.action for entry in entries) == [
            "license_created",
            "license_suspended",
        ]
        creation = entries.get(action="license_created")
        assert creation.team_id == db_team.id
        assert creation.entity_type == "license"
        assert creation.changes["expiration_type"] == "DURATION"
        assert creation.actor == "system"


@pytest.mark.django_db
@pytest.mark.integration
class TestWebhookDelivery:
    """Tests for the webhook pipeline (handler -> task -> delivery)."""

    def test_subscribed_event_is_delivered(
        self, db_team, webhook, create_handler, django_capture_on_commit_callbacks, now
    ):
        with mock.patch(
            "core.infrastructure.webhooks.requests.post", return_value=ok_response()
        ) as post, django_capture_on_commit_callbacks(execute=True):
            created = async_to_sync(create_handler.handle)(
                CreateLicenseCommand(team_id=db_team.id), now=now
            )

        delivery = WebhookEvent.objects.get(webhook=webhook)
        assert delivery.event_type == "license.created"
        assert delivery.status == WebhookDeliveryStatus.DELIVERED.value
        assert delivery.attempts == 1
        assert delivery.response_status == 200
        assert delivery.payload["data"]["license_id"] == str(created.id)

        post.assert_called_once()
        _, kwargs = post.call_args
        body = kwargs["data"]
        assert kwargs["headers"]["X-Webhook-Event"] == "license.created"
        assert WebhookDeliveryService.verify_signature(
            body, kwargs["headers"]["X-Webhook-Signature"], SECRET
        )
        assert json.loads(body)["event"] == "license.created"
        assert kwargs["timeout"] == webhook.timeout_seconds

    def test_unsubscribed_and_inactive_webhooks_are_skipped(
        self, db_team, webhook, create_handler, django_capture_on_commit_callbacks, now
    ):
        WebhookConfig.objects.create(
            team=db_team,
            url="https://hooks.example.com/other",
            secret=SECRET,
            events=["license.deleted"],
        )
        WebhookConfig.objects.create(
            team=db_team,
            url="https://hooks.example.com/off",
            secret=SECRET,
            events=["license.created"],
            is_active=False,
        )

        with mock.patch(
            "core.infrastructure.webhooks.requests.post", return_value=ok_response()
        ) as post, django_capture_on_commit_callbacks(execute=True):
            async_to_sync(create_handler.handle)(CreateLicenseCommand(team_id=db_team.id), now=now)

        assert post.call_count == 1
        assert list(WebhookEvent.objects.values_list("webhook_id", flat=True)) == [webhook.id]

    def test_failed_delivery_is_recorded(
        self, db_team, webhook, create_handler, django_capture_on_commit_callbacks, now
    ):
        with mock.patch(
            "core.infrastructure.webhooks.requests.post",
            side_effect=requests.exceptions.ConnectionError("connection refused"),
        ), django_capture_on_commit_callbacks(execute=True):
            async_to_sync(create_handler.handle)(CreateLicenseCommand(team_id=db_team.id), now=now)

        delivery = WebhookEvent.objects.get(webhook=webhook)
        assert delivery.status == WebhookDeliveryStatus.FAILED.value
        assert delivery.attempts == 1
        assert delivery.response_status is None
        assert "connection refused" in delivery.error

    def test_delivery_waits_for_commit(
        self, db_team, webhook, create_handler, django_capture_on_commit_callbacks, now
    ):
        with mock.patch(
            "core.infrastructure.webhooks.requests.post", return_value=ok_response()
        ) as post:
            with django_capture_on_commit_callbacks() as callbacks:
                async_to_sync(create_handler.handle)(
                    CreateLicenseCommand(team_id=db_team.id), now=now
                )

            delivery = WebhookEvent.objects.get(webhook=webhook)
            assert delivery.status == WebhookDeliveryStatus.PENDING.value
            post.assert_not_called()
            assert len(callbacks) == 1

            callbacks[0]()

        delivery.refresh_from_db()
        assert delivery.status == WebhookDeliveryStatus.DELIVERED.value

    def test_http_error_is_recorded(self, webhook):
        delivery = WebhookEvent.objects.create(
            webhook=webhook, event_type="license.created", payload={"data": {}}
        )
        response = mock.Mock(status_code=500)
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("500 Server Error")

        with mock.patch("core.infrastructure.webhooks.requests.post", return_value=response):
            assert WebhookDeliveryService.deliver(delivery) is False

        delivery.refresh_from_db()
        assert delivery.status == WebhookDeliveryStatus.FAILED.value
        assert delivery.response_status == 500

    def test_redelivery_counts_attempts(self, webhook):
        delivery = WebhookEvent.objects.create(
            webhook=webhook, event_type="license.created", payload={"data": {}}
        )

        with mock.patch(
            "core.infrastructure.webhooks.requests.post",
            side_effect=requests.exceptions.Timeout("timed out"),
        ):
            deliver_webhook_task(str(delivery.id))
        with mock.patch(
            "core.infrastructure.webhooks.requests.post", return_value=ok_response(204)
        ):
            assert deliver_webhook_task(str(delivery.id)) is True

        delivery.refresh_from_db()
        assert delivery.attempts == 2
        assert delivery.status == WebhookDeliveryStatus.DELIVERED.value
        assert delivery.error == ""

    def test_task_ignores_missing_event(self, db):
        assert deliver_webhook_task("00000000-0000-0000-0000-000000000000") is False


class TestSignature:
    """Tests for webhook signatures."""

    def test_round_trip(self):
        signature = WebhookDeliveryService.generate_signature('{"a": 1}', SECRET)
        assert WebhookDeliveryService.verify_signature('{"a": 1}', signature, SECRET)
        assert not WebhookDeliveryService.verify_signature('{"a": 2}', signature, SECRET)
