"""
Integration tests for repository implementations.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync
from django.db import IntegrityError

from core.domain.value_objects import ExpirationStart, ExpirationType, LicenseStatus
from licenses.domain.expiration import INACTIVITY_WINDOW
from licenses.infrastructure.models import License as LicenseModel


@pytest.mark.django_db
@pytest.mark.integration
class TestDjangoLicenseRepository:
    """Integration tests for DjangoLicenseRepository."""

    def test_save_and_find(self, db_team, save_license, django_license_repository, now):
        """Test saving and finding a license."""
        saved = save_license(
            db_team.id,
            expiration_type=ExpirationType.DURATION,
            expiration_start=ExpirationStart.CREATION,
            expiration_days=30,
            license_key="FIND-ME",
        )

        found = async_to_sync(django_license_repository.find_by_id)(saved.id)
        by_key = async_to_sync(django_license_repository.find_by_key)(db_team.id, "FIND-ME")

        assert found == saved
        assert by_key.id == saved.id
        assert found.expiration_type == ExpirationType.DURATION
        assert found.expiration_start == ExpirationStart.CREATION
        assert found.expiration_date == now + timedelta(days=30)

    def test_find_not_found(self, db_team, django_license_repository):
        """Test finding non-existent license."""
        assert async_to_sync(django_license_repository.find_by_id)(uuid.uuid4()) is None
        assert async_to_sync(django_license_repository.find_by_key)(db_team.id, "NOPE") is None

    def test_find_by_key_is_scoped_to_team(self, db_team, save_license, django_license_repository):
        save_license(db_team.id, license_key="SHARED")
        assert async_to_sync(django_license_repository.find_by_key)(uuid.uuid4(), "SHARED") is None

    def test_update_keeps_created_at(self, db_team, save_license, django_license_repository, now):
        """Test saving an existing license updates it in place."""
        saved = save_license(db_team.id)
        later = now + timedelta(days=3)

        updated = async_to_sync(django_license_repository.save)(saved.suspend(later))

        assert updated.id == saved.id
        assert updated.created_at == saved.created_at
        assert updated.suspended is True
        assert updated.updated_at == later

    def test_record_activity(self, db_team, save_license, django_license_repository, now):
        saved = save_license(
            db_team.id,
            expiration_type=ExpirationType.DURATION,
            expiration_start=ExpirationStart.ACTIVATION,
            expiration_days=10,
        )
        later = now + timedelta(days=3)

        updated = async_to_sync(django_license_repository.record_activity)(saved.id, later)

        assert updated.last_active_at == later
        assert updated.first_activated_at == later
        assert updated.expiration_date == later + timedelta(days=10)
        assert async_to_sync(django_license_repository.find_by_id)(saved.id) == updated

    def test_record_activity_not_found(self, db, django_license_repository, now):
        assert async_to_sync(django_license_repository.record_activity)(uuid.uuid4(), now) is None

    def test_record_activity_keeps_concurrent_suspension(
        self, db_team, save_license, django_license_repository, now
    ):
        loaded = save_license(db_team.id)
        LicenseModel.objects.filter(id=loaded.id).update(suspended=True)

        updated = async_to_sync(django_license_repository.record_activity)(loaded.id, now)

        assert updated.suspended is True
        assert LicenseModel.objects.get(id=loaded.id).suspended is True

    def test_save_keeps_concurrent_activity(
        self, db_team, save_license, django_license_repository, now
    ):
        loaded = save_license(db_team.id)
        async_to_sync(django_license_repository.record_activity)(loaded.id, now)

        async_to_sync(django_license_repository.save)(loaded.suspend(now))

        stored = LicenseModel.objects.get(id=loaded.id)
        assert stored.suspended is True
        assert stored.last_active_at == now
        assert stored.first_activated_at == now

    def test_duplicate_key_in_team_rejected(self, db_team, save_license):
        save_license(db_team.id, license_key="ONCE")
        with pytest.raises(IntegrityError):
            save_license(db_team.id, license_key="ONCE")

    def test_list_expiring_before(self, db_team, save_license, django_license_repository, now):
        old = save_license(
            db_team.id,
            expiration_type=ExpirationType.DATE,
            expiration_date=now - timedelta(days=40),
        )
        save_license(
            db_team.id,
            expiration_type=ExpirationType.DATE,
            expiration_date=now - timedelta(days=5),
        )
        save_license(db_team.id)

        found = async_to_sync(django_license_repository.list_expiring_before)(
            db_team.id, now - timedelta(days=30)
        )

        assert [license.id for license in found] == [old.id]

    def test_delete_many(self, db_team, save_license, django_license_repository):
        first = save_license(db_team.id)
        second = save_license(db_team.id)
        kept = save_license(db_team.id)

        deleted = async_to_sync(django_license_repository.delete_many)([first.id, second.id])

        assert deleted == 2
        assert async_to_sync(django_license_repository.find_by_id)(first.id) is None
        assert async_to_sync(django_license_repository.find_by_id)(kept.id) is not None
        assert async_to_sync(django_license_repository.delete_many)([]) == 0


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseStatusFilter:
    """The ORM status filter must select what the evaluator classifies."""

    @pytest.fixture
    def mixed_licenses(self, db_team, save_license, now):
        window = INACTIVITY_WINDOW
        created = now - timedelta(days=100)
        date = ExpirationType.DATE
        return [
            # ACTIVE / INACTIVE, never expiring
            save_license(db_team.id, created_at=created, last_active_at=now - timedelta(days=1)),
            save_license(db_team.id, created_at=created, last_active_at=now - window),
            save_license(db_team.id, created_at=created),
            # EXPIRED, including the boundary and a recently used one
            save_license(db_team.id, expiration_type=date, expiration_date=now, created_at=created),
            save_license(
                db_team.id,
                expiration_type=date,
                expiration_date=now - timedelta(days=3),
                created_at=created,
                last_active_at=now - timedelta(days=4),
            ),
            # EXPIRING, including the window edge
            save_license(
                db_team.id,
                expiration_type=date,
                expiration_date=now + window,
                created_at=created,
            ),
            save_license(
                db_team.id,
                expiration_type=date,
                expiration_date=now + timedelta(days=2),
                created_at=created,
                last_active_at=now - timedelta(days=1),
            ),
            # just past the window: activity decides
            save_license(
                db_team.id,
                expiration_type=date,
                expiration_date=now + window + timedelta(seconds=1),
                created_at=created,
                last_active_at=now - timedelta(days=1),
            ),
            # activation-anchored, never used
            save_license(
                db_team.id,
                expiration_type=ExpirationType.DURATION,
                expiration_start=ExpirationStart.ACTIVATION,
                expiration_days=30,
                created_at=created,
            ),
            # suspended and expired
            save_license(
                db_team.id,
                expiration_type=date,
                expiration_date=now - timedelta(days=1),
                suspended=True,
                created_at=created,
            ),
        ]

    @pytest.mark.parametrize("status", list(LicenseStatus))
    def test_filter_agrees_with_classification(
        self, status, db_team, mixed_licenses, django_license_repository, now
    ):
        expected = {
            license.id
            for license in mixed_licenses
            if license.status(now, INACTIVITY_WINDOW) == status
        }

        found = async_to_sync(django_license_repository.list_by_team)(
            db_team.id, status, now, INACTIVITY_WINDOW
        )

        assert expected
        assert {license.id for license in found} == expected

    def test_no_status_lists_all(self, db_team, mixed_licenses, django_license_repository, now):
        found = async_to_sync(django_license_repository.list_by_team)(db_team.id, None, now)
        assert len(found) == len(mixed_licenses)


@pytest.mark.django_db
@pytest.mark.integration
class TestDjangoTeamRepository:
    """Integration tests for DjangoTeamRepository."""

    def test_find_and_list(self, db_team, django_team_repository):
        team = async_to_sync(django_team_repository.find_by_id)(db_team.id)

        assert team.name == "Acme"
        assert team.expired_license_cleanup_days == 30
        assert team.cleans_up_expired_licenses is True
        assert [t.id for t in async_to_sync(django_team_repository.list_all)()] == [db_team.id]

    def test_find_not_found(self, db, django_team_repository):
        assert async_to_sync(django_team_repository.find_by_id)(uuid.uuid4()) is None


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseStatusFilterAtCalendarEdge:
    """Windows that leave the representable range still filter like the evaluator."""

    def test_filter_near_calendar_end(self, db_team, save_license, django_license_repository):
        far_now = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=1)
        licenses = [
            save_license(db_team.id),
            save_license(db_team.id, last_active_at=far_now),
            save_license(
                db_team.id,
                expiration_type=ExpirationType.DATE,
                expiration_date=far_now + timedelta(hours=1),
            ),
        ]

        for status in LicenseStatus:
            expected = {
                license.id
                for license in licenses
                if license.status(far_now, INACTIVITY_WINDOW) == status
            }
            found = async_to_sync(django_license_repository.list_by_team)(
                db_team.id, status, far_now, INACTIVITY_WINDOW
            )
            assert {license.id for license in found} == expected
