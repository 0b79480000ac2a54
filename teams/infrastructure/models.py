"""
Team, WebhookConfig and WebhookEvent models.
"""

import uuid

from django.db import models

from core.domain.value_objects import WebhookDeliveryStatus


class Team(models.Model):
    """
    Represents a tenant in the system.
    Each team has isolated data access.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, help_text="Team display name")
    expired_license_cleanup_days = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Delete licenses this many days after they expire (empty disables)",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "teams"
        ordering = ["name"]

    def __str__(self):
        return self.name

    def clean(self):
        """Validate team fields."""
        from django.core.exceptions import ValidationError

        if not self.name or not self.name.strip():
            raise ValidationError("Team name is required")
        if self.expired_license_cleanup_days is not None and not (
            1 <= self.expired_license_cleanup_days <= 1825
        ):
            raise ValidationError("Cleanup days must be between 1 and 1825")

    def save(self, *args, **kwargs):
        """Save team with validation."""
        self.full_clean()
        super().save(*args, **kwargs)


class WebhookConfig(models.Model):
    """
    Webhook configuration for teams.

    Allows teams to receive webhooks for license events.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="webhook_configs")
    url = models.URLField(max_length=500, help_text="Webhook URL")
    secret = models.CharField(
        max_length=255,
        help_text="Secret for webhook signature verification",
    )
    events = models.JSONField(
        default=list,
        help_text="List of event names to subscribe to, e.g. 'license.created'",
    )
    is_active = models.BooleanField(default=True)
    timeout_seconds = models.IntegerField(default=10, help_text="Request timeout in seconds")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "webhook_configs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["team", "is_active"]),
        ]

    def __str__(self):
        return f"{self.team.name} - {self.url}"

    def clean(self):
        """Validate webhook configuration."""
        from django.core.exceptions import ValidationError

        if not self.url:
            raise ValidationError("Webhook URL is required")
        if not self.secret:
            raise ValidationError("Webhook secret is required")
        if not isinstance(self.events, list):
            raise ValidationError("Events must be a list")

    def save(self, *args, **kwargs):
        """Save with validation."""
        self.full_clean()
        super().save(*args, **kwargs)

    def subscribes_to(self, event_name: str) -> bool:
        """Check whether this webhook wants ``event_name``."""
        return self.is_active and event_name in self.events


class WebhookEvent(models.Model):
    """
    One delivery of one event to one webhook.

    Records the outcome and how many attempts were made.
    """

    STATUS_CHOICES = [(status.value, status.value.title()) for status in WebhookDeliveryStatus]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    webhook = models.ForeignKey(WebhookConfig, on_delete=models.CASCADE, related_name="deliveries")
    event_type = models.CharField(max_length=100)
    payload = models.JSONField(default=dict)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=WebhookDeliveryStatus.PENDING.value,
        db_index=True,
    )
    attempts = models.PositiveIntegerField(default=0)
    response_status = models.IntegerField(null=True, blank=True)
    error = models.TextField(blank=True, default="")
    last_attempt_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "webhook_events"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["webhook", "status"]),
        ]

    def __str__(self):
        return f"{self.event_type} -> {self.webhook.url} ({self.status})"
