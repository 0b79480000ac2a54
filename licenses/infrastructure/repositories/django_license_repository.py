"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from core.domain.value_objects import ExpirationStart, ExpirationType, LicenseStatus
from licenses.domain.expiration import INACTIVITY_WINDOW
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.status_filter import EXPIRING_TYPES, license_status_q
from licenses.ports.license_repository import LicenseRepository

# Written when an existing license changes; activity columns are left alone
POLICY_FIELDS = [
    "license_key",
    "expiration_type",
    "expiration_start",
    "expiration_days",
    "expiration_date",
    "suspended",
    "updated_at",
]
ACTIVITY_FIELDS = ["expiration_date", "first_activated_at", "last_active_at", "updated_at"]


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            team_id=model.team_id,
            license_key=model.license_key,
            expiration_type=ExpirationType(model.expiration_type),
            expiration_start=(
                ExpirationStart(model.expiration_start) if model.expiration_start else None
            ),
            expiration_days=model.expiration_days,
            expiration_date=model.expiration_date,
            suspended=model.suspended,
            first_activated_at=model.first_activated_at,
            last_active_at=model.last_active_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, license: License) -> LicenseModel:
        """
        Write a domain entity to its Django model row.

        Args:
            license: License domain entity

        Returns:
            Stored Django License model
        """
        fields = {
            "team_id": license.team_id,
            "license_key": license.license_key,
            "expiration_type": license.expiration_type.value,
            "expiration_start": (
                license.expiration_start.value if license.expiration_start else None
            ),
            "expiration_days": license.expiration_days,
            "expiration_date": license.expiration_date,
            "suspended": license.suspended,
            "first_activated_at": license.first_activated_at,
            "last_active_at": license.last_active_at,
            "created_at": license.created_at,
            "updated_at": license.updated_at,
        }
        model, created = LicenseModel.objects.get_or_create(id=license.id, defaults=fields)
        if not created:
            for name in POLICY_FIELDS:
                setattr(model, name, fields[name])
            model.save(update_fields=POLICY_FIELDS)
        return model

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save a license entity.

        Activity (first/last use) of an existing license is not
        overwritten; it only changes through ``record_activity``.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        return self._to_domain(self._to_model(license))

    @sync_to_async
    def record_activity(self, license_id: uuid.UUID, now: datetime) -> Optional[License]:
        """
        Record a successful validation of a license.

        The row is locked and re-read so a concurrent suspension or policy
        change is kept; only the activity columns are written.

        Args:
            license_id: License UUID
            now: Validation instant

        Returns:
            Updated license entity or None if not found
        """
        with transaction.atomic():
            try:
                model = LicenseModel.objects.select_for_update().get(id=license_id)
            except LicenseModel.DoesNotExist:
                return None
            license = self._to_domain(model).record_activity(now)
            for name in ACTIVITY_FIELDS:
                setattr(model, name, getattr(license, name))
            model.save(update_fields=ACTIVITY_FIELDS)
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        try:
            model = LicenseModel.objects.get(id=license_id)
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_key(self, team_id: uuid.UUID, license_key: str) -> Optional[License]:
        """
        Find a license by its key within a team.

        Args:
            team_id: Team UUID
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        try:
            model = LicenseModel.objects.get(team_id=team_id, license_key=license_key)
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def list_by_team(
        self,
        team_id: uuid.UUID,
        status: Optional[LicenseStatus],
        now: datetime,
        inactivity_window: timedelta = INACTIVITY_WINDOW,
    ) -> List[License]:
        """
        List a team's licenses, optionally only those with a given status.

        Args:
            team_id: Team UUID
            status: Status to filter by (None for all)
            now: Evaluation instant for the status filter
            inactivity_window: Expiring/inactive window width

        Returns:
            List of License entities
        """
        queryset = LicenseModel.objects.filter(team_id=team_id)
        if status is not None:
            queryset = queryset.filter(license_status_q(status, now, inactivity_window))
        return [self._to_domain(model) for model in queryset]

    @sync_to_async
    def list_expiring_before(self, team_id: uuid.UUID, cutoff: datetime) -> List[License]:
        """
        List a team's licenses with an expiring policy that expired before a cutoff.

        Args:
            team_id: Team UUID
            cutoff: Exclusive upper bound for the resolved expiration date

        Returns:
            List of License entities
        """
        queryset = LicenseModel.objects.filter(
            team_id=team_id,
            expiration_type__in=EXPIRING_TYPES,
            expiration_date__lt=cutoff,
        )
        return [self._to_domain(model) for model in queryset]

    @sync_to_async
    def delete_many(self, license_ids: List[uuid.UUID]) -> int:
        """
        Delete licenses in one transaction.

        Args:
            license_ids: License UUIDs

        Returns:
            Number of deleted licenses
        """
        if not license_ids:
            return 0
        with transaction.atomic():
            _, per_model = LicenseModel.objects.filter(id__in=license_ids).delete()
        return per_model.get(LicenseModel._meta.label, 0)
