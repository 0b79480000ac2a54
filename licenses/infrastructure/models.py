"""
License and AuditLog models.
"""
import uuid

from django.db import models

from core.domain.value_objects import ExpirationStart, ExpirationType


class License(models.Model):
    """
    A license issued by a team.

    ``expiration_date`` stores the resolved absolute expiration instant.
    """

    EXPIRATION_TYPE_CHOICES = [(t.value, t.value.title()) for t in ExpirationType]
    EXPIRATION_START_CHOICES = [(s.value, s.value.title()) for s in ExpirationStart]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey("teams.Team", on_delete=models.CASCADE, related_name="licenses")
    license_key = models.CharField(max_length=255)
    expiration_type = models.CharField(
        max_length=20,
        choices=EXPIRATION_TYPE_CHOICES,
        default=ExpirationType.NEVER.value,
    )
    expiration_start = models.CharField(
        max_length=20,
        choices=EXPIRATION_START_CHOICES,
        null=True,
        blank=True,
    )
    expiration_days = models.PositiveIntegerField(null=True, blank=True)
    expiration_date = models.DateTimeField(null=True, blank=True)
    suspended = models.BooleanField(default=False)
    first_activated_at = models.DateTimeField(null=True, blank=True)
    last_active_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["team", "license_key"], name="unique_team_license_key"),
        ]
        indexes = [
            models.Index(fields=["team", "suspended"]),
            models.Index(fields=["team", "expiration_date"]),
            models.Index(fields=["last_active_at"]),
        ]

    def __str__(self):
        return self.license_key


class AuditLog(models.Model):
    """
    Immutable audit trail of all license-related changes.
    """

    ACTION_CHOICES = [
        ("license_created", "License Created"),
        ("license_updated", "License Updated"),
        ("license_expiration_started", "License Expiration Started"),
        ("license_suspended", "License Suspended"),
        ("license_resumed", "License Resumed"),
        ("license_deleted", "License Deleted"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey("teams.Team", on_delete=models.CASCADE, related_name="audit_logs")
    entity_type = models.CharField(max_length=50)
    entity_id = models.UUIDField()
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    changes = models.JSONField(default=dict, help_text="Details of the change")
    actor = models.CharField(max_length=255, default="system", help_text="Who performed the action")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["team", "entity_type", "entity_id"]),
            models.Index(fields=["created_at"]),
            models.Index(fields=["action"]),
        ]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"
