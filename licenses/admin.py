"""
Django admin configuration for licenses app.

License edits go through the same handlers as every other caller, so the
expiration policy is validated and the expiration date is re-resolved.
"""
from asgiref.sync import async_to_sync
from django import forms
from django.conf import settings
from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from core.domain.exceptions import InvalidExpirationPolicyError
from core.domain.value_objects import ExpirationStart, ExpirationType
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.config import get_inactivity_window
from licenses.application.handlers.create_license_handler import CreateLicenseHandler
from licenses.application.handlers.update_license_handler import UpdateLicenseHandler
from licenses.domain.policy import LicensePolicy
from licenses.domain.services import LicensePolicyValidator
from licenses.infrastructure.models import AuditLog, License
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)
from teams.infrastructure.repositories.django_team_repository import DjangoTeamRepository

STATUS_COLORS = {
    "ACTIVE": "green",
    "INACTIVE": "gray",
    "EXPIRING": "orange",
    "EXPIRED": "red",
    "SUSPENDED": "purple",
}


class LicenseAdminForm(forms.ModelForm):
    """License form that validates the expiration policy."""

    license_key = forms.CharField(
        max_length=255, required=False, help_text="Leave blank to generate a key."
    )

    class Meta:
        model = License
        fields = [
            "team",
            "license_key",
            "suspended",
            "expiration_type",
            "expiration_start",
            "expiration_days",
            "expiration_date",
        ]
        help_texts = {
            "expiration_date": "Only used by DATE licenses; computed for DURATION ones.",
        }

    def clean(self):
        cleaned_data = super().clean()
        if not cleaned_data.get("expiration_type"):
            return cleaned_data

        expiration_type = ExpirationType(cleaned_data["expiration_type"])
        start = cleaned_data.get("expiration_start")
        self.policy = LicensePolicy(
            expiration_type=expiration_type,
            expiration_start=ExpirationStart(start) if start else None,
            expiration_days=cleaned_data.get("expiration_days"),
            expiration_date=(
                cleaned_data.get("expiration_date")
                if expiration_type == ExpirationType.DATE
                else None
            ),
            suspended=bool(cleaned_data.get("suspended")),
        )
        # pylint: disable=protected-access
        try:
            LicensePolicyValidator.validate(
                self.policy, timezone.now(), creating=self.instance._state.adding
            )
        except InvalidExpirationPolicyError as e:
            self.add_error(e.field if e.field in self.fields else None, e.message)
        return cleaned_data


def _policy_kwargs(policy: LicensePolicy) -> dict:
    return {
        "expiration_type": policy.expiration_type,
        "expiration_start": policy.expiration_start,
        "expiration_days": policy.expiration_days,
        "expiration_date": policy.expiration_date,
        "suspended": policy.suspended,
    }


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    form = LicenseAdminForm
    list_display = [
        "license_key",
        "team",
        "status_display",
        "expiration_type",
        "expiration_date",
        "last_active_at",
        "created_at",
    ]
    list_filter = ["expiration_type", "expiration_start", "suspended", "team"]
    search_fields = ["license_key", "team__name"]
    readonly_fields = [
        "id",
        "first_activated_at",
        "last_active_at",
        "created_at",
        "updated_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "team", "license_key", "suspended"),
            },
        ),
        (
            "Expiration",
            {
                "fields": (
                    "expiration_type",
                    "expiration_start",
                    "expiration_days",
                    "expiration_date",
                ),
            },
        ),
        (
            "Activity",
            {
                "fields": ("first_activated_at", "last_active_at"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display computed status with color coding."""
        # pylint: disable=protected-access
        license = DjangoLicenseRepository()._to_domain(obj)
        status = license.status(timezone.now(), get_inactivity_window()).value
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            STATUS_COLORS.get(status, "black"),
            status,
        )

    status_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("team")

    def get_readonly_fields(self, request, obj=None):
        """Team and key are fixed once the license exists."""
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            readonly += ["team", "license_key"]
        return readonly

    def save_model(self, request, obj, form, change):
        """Save through the license handlers instead of writing the row directly."""
        repository = DjangoLicenseRepository()
        if change:
            handler = UpdateLicenseHandler(repository)
            async_to_sync(handler.handle)(
                UpdateLicenseCommand(
                    license_id=obj.id, team_id=obj.team_id, **_policy_kwargs(form.policy)
                )
            )
        else:
            handler = CreateLicenseHandler(DjangoTeamRepository(), repository)
            created = async_to_sync(handler.handle)(
                CreateLicenseCommand(
                    team_id=obj.team_id,
                    license_key=obj.license_key or None,
                    **_policy_kwargs(form.policy),
                )
            )
            obj.pk = created.id
        obj.refresh_from_db()


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Admin interface for AuditLog model (read-only)."""

    list_display = ["action", "entity_type", "entity_id", "team", "actor", "created_at"]
    list_filter = ["action", "entity_type", "team"]
    search_fields = ["entity_id", "actor"]
    readonly_fields = [
        "id",
        "team",
        "entity_type",
        "entity_id",
        "action",
        "changes",
        "actor",
        "created_at",
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return settings.DEBUG
