"""
Integration tests for license validation against the database.
"""
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync

from core.domain.value_objects import ExpirationStart, ExpirationType
from licenses.application.commands.validate_license import ValidateLicenseCommand
from licenses.application.handlers.validate_license_handler import ValidateLicenseHandler
from licenses.infrastructure.models import License as LicenseModel


@pytest.mark.django_db
@pytest.mark.integration
class TestValidateLicenseHandler:
    """Validation only writes the activity of the stored license."""

    def test_suspension_after_load_is_kept(
        self, db_team, save_license, django_license_repository, recording_bus, monkeypatch, now
    ):
        license = save_license(db_team.id, license_key="RACE")
        find_by_key = django_license_repository.find_by_key

        async def find_then_suspend(team_id, license_key):
            loaded = await find_by_key(team_id, license_key)
            await LicenseModel.objects.filter(id=loaded.id).aupdate(suspended=True)
            return loaded

        monkeypatch.setattr(django_license_repository, "find_by_key", find_then_suspend)
        handler = ValidateLicenseHandler(django_license_repository, event_bus=recording_bus)

        result = async_to_sync(handler.handle)(
            ValidateLicenseCommand(team_id=db_team.id, license_key="RACE"), now=now
        )

        stored = LicenseModel.objects.get(id=license.id)
        assert result.is_valid is True
        assert stored.suspended is True
        assert stored.last_active_at == now

    def test_first_validation_starts_clock(
        self, db_team, save_license, django_license_repository, recording_bus, now
    ):
        license = save_license(
            db_team.id,
            expiration_type=ExpirationType.DURATION,
            expiration_start=ExpirationStart.ACTIVATION,
            expiration_days=14,
            license_key="FIRST-USE",
        )
        handler = ValidateLicenseHandler(django_license_repository, event_bus=recording_bus)

        result = async_to_sync(handler.handle)(
            ValidateLicenseCommand(team_id=db_team.id, license_key="FIRST-USE"), now=now
        )

        stored = LicenseModel.objects.get(id=license.id)
        assert result.expiration_date == now + timedelta(days=14)
        assert stored.expiration_date == now + timedelta(days=14)
        assert stored.first_activated_at == now
