"""
Django admin configuration for teams app.
"""
from django.contrib import admin

from teams.infrastructure.models import Team, WebhookConfig, WebhookEvent


class WebhookConfigInline(admin.TabularInline):
    """Inline for a team's webhooks."""

    model = WebhookConfig
    extra = 0
    fields = ["url", "events", "is_active", "timeout_seconds"]


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    """Admin interface for Team model."""

    list_display = ["name", "expired_license_cleanup_days", "license_count", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [WebhookConfigInline]

    def license_count(self, obj):
        """Display number of licenses for this team."""
        return obj.licenses.count()

    license_count.short_description = "Licenses"


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    """Admin interface for webhook delivery records."""

    list_display = [
        "event_type",
        "webhook",
        "status",
        "attempts",
        "response_status",
        "last_attempt_at",
        "created_at",
    ]
    list_filter = ["status", "event_type"]
    readonly_fields = [
        "id",
        "webhook",
        "event_type",
        "payload",
        "status",
        "attempts",
        "response_status",
        "error",
        "last_attempt_at",
        "created_at",
    ]
    actions = ["redeliver"]

    @admin.action(description="Redeliver selected webhook events")
    def redeliver(self, request, queryset):
        """Queue one more delivery attempt for each selected event."""
        from core.tasks import deliver_webhook_task

        for webhook_event in queryset:
            deliver_webhook_task.delay(str(webhook_event.id))
        self.message_user(request, f"Queued {queryset.count()} webhook event(s)")
