"""
Pytest configuration and shared fixtures.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from asgiref.sync import async_to_sync

from core.domain.events import DomainEvent, EventBus
from core.domain.value_objects import ExpirationStart, ExpirationType, LicenseStatus
from licenses.domain.expiration import INACTIVITY_WINDOW
from licenses.domain.license import License
from licenses.domain.policy import LicensePolicy
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from licenses.ports.license_repository import LicenseRepository
from teams.domain.team import Team
from teams.infrastructure.repositories.django_team_repository import DjangoTeamRepository
from teams.ports.team_repository import TeamRepository

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class RecordingEventBus(EventBus):
    """Event bus that only remembers what was published."""

    def __init__(self):
        self.events: List[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def subscribe(self, event_type, handler) -> None:
        raise NotImplementedError

    def of_type(self, event_type) -> List[DomainEvent]:
        return [event for event in self.events if isinstance(event, event_type)]


class InMemoryTeamRepository(TeamRepository):
    """Dict-backed TeamRepository."""

    def __init__(self, teams=()):
        self.teams: Dict[uuid.UUID, Team] = {team.id: team for team in teams}

    async def find_by_id(self, team_id: uuid.UUID) -> Optional[Team]:
        return self.teams.get(team_id)

    async def list_all(self) -> List[Team]:
        return list(self.teams.values())


class InMemoryLicenseRepository(LicenseRepository):
    """Dict-backed LicenseRepository, filtering with the evaluator."""

    def __init__(self, licenses=()):
        self.licenses: Dict[uuid.UUID, License] = {lic.id: lic for lic in licenses}

    async def save(self, license: License) -> License:
        self.licenses[license.id] = license
        return license

    async def record_activity(self, license_id: uuid.UUID, now: datetime) -> Optional[License]:
        license = self.licenses.get(license_id)
        if license is None:
            return None
        self.licenses[license_id] = license.record_activity(now)
        return self.licenses[license_id]

    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        return self.licenses.get(license_id)

    async def find_by_key(self, team_id: uuid.UUID, license_key: str) -> Optional[License]:
        for license in self.licenses.values():
            if license.team_id == team_id and license.license_key == license_key:
                return license
        return None

    async def list_by_team(
        self,
        team_id: uuid.UUID,
        status: Optional[LicenseStatus],
        now: datetime,
        inactivity_window: timedelta = INACTIVITY_WINDOW,
    ) -> List[License]:
        return [
            license
            for license in self.licenses.values()
            if license.team_id == team_id
            and (status is None or license.status(now, inactivity_window) == status)
        ]

    async def list_expiring_before(self, team_id: uuid.UUID, cutoff: datetime) -> List[License]:
        return [
            license
            for license in self.licenses.values()
            if license.team_id == team_id
            and license.expiration_type.expires
            and license.expiration_date is not None
            and license.expiration_date < cutoff
        ]

    async def delete_many(self, license_ids: List[uuid.UUID]) -> int:
        deleted = 0
        for license_id in license_ids:
            if self.licenses.pop(license_id, None) is not None:
                deleted += 1
        return deleted


def make_license(
    team_id: uuid.UUID,
    expiration_type: ExpirationType = ExpirationType.NEVER,
    expiration_start: Optional[ExpirationStart] = None,
    expiration_days: Optional[int] = None,
    expiration_date: Optional[datetime] = None,
    suspended: bool = False,
    created_at: datetime = NOW,
    last_active_at: Optional[datetime] = None,
    license_key: Optional[str] = None,
) -> License:
    """Build a License entity with resolved expiration."""
    license = License.create(
        team_id=team_id,
        license_key=license_key or f"KEY-{uuid.uuid4().hex[:12].upper()}",
        policy=LicensePolicy(
            expiration_type=expiration_type,
            expiration_start=expiration_start,
            expiration_days=expiration_days,
            expiration_date=expiration_date,
            suspended=suspended,
        ),
        now=created_at,
    )
    if last_active_at is not None:
        license = license.record_activity(last_active_at)
    return license


@pytest.fixture
def now():
    """Fixed evaluation instant."""
    return NOW


@pytest.fixture
def recording_bus():
    """Fixture for an event bus that records published events."""
    return RecordingEventBus()


@pytest.fixture
def team():
    """Fixture for a Team entity with a 30 day cleanup window."""
    return Team(id=uuid.uuid4(), name="Acme", expired_license_cleanup_days=30)


@pytest.fixture
def team_repository(team):
    """Fixture for an in-memory TeamRepository holding ``team``."""
    return InMemoryTeamRepository([team])


@pytest.fixture
def license_repository():
    """Fixture for an empty in-memory LicenseRepository."""
    return InMemoryLicenseRepository()


@pytest.fixture
def django_license_repository():
    """Fixture for DjangoLicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def django_team_repository():
    """Fixture for DjangoTeamRepository."""
    return DjangoTeamRepository()


@pytest.fixture
def db_team(db):
    """Fixture for a Team saved in database."""
    from teams.infrastructure.models import Team as TeamModel

    return TeamModel.objects.create(name="Acme", expired_license_cleanup_days=30)


@pytest.fixture
def save_license(db, django_license_repository):
    """Fixture returning a helper that persists a License built by make_license."""

    def _save(team_id, **kwargs):
        return async_to_sync(django_license_repository.save)(make_license(team_id, **kwargs))

    return _save


@pytest.fixture
def license_factory():
    """Fixture exposing make_license."""
    return make_license
