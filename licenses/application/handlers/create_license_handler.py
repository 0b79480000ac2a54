"""
CreateLicenseHandler.

Handles the create license command.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from django.utils import timezone

from core.domain.events import EventBus
from core.domain.exceptions import DuplicateLicenseKeyError, TeamNotFoundError
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_created_total
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.config import get_inactivity_window
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import LicenseCreated
from licenses.domain.license import License
from licenses.domain.policy import LicensePolicy
from licenses.domain.services import LicenseKeyGenerator, LicensePolicyValidator
from licenses.ports.license_repository import LicenseRepository
from teams.ports.team_repository import TeamRepository

logger = logging.getLogger(__name__)


class CreateLicenseHandler:
    """Handler for CreateLicenseCommand."""

    def __init__(
        self,
        team_repository: TeamRepository,
        license_repository: LicenseRepository,
        event_bus: Optional[EventBus] = None,
        inactivity_window: Optional[timedelta] = None,
    ):
        """Initialize handler with repositories."""
        self.team_repository = team_repository
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus
        self.inactivity_window = inactivity_window or get_inactivity_window()

    async def handle(
        self, command: CreateLicenseCommand, now: Optional[datetime] = None
    ) -> LicenseDTO:
        """
        Handle create license command.

        Args:
            command: CreateLicenseCommand
            now: Creation instant (defaults to the current time)

        Returns:
            LicenseDTO of the created license

        Raises:
            TeamNotFoundError: If team not found
            InvalidExpirationPolicyError: If the expiration policy is malformed
            DuplicateLicenseKeyError: If the team already uses the key
        """
        now = now or timezone.now()

        team = await self.team_repository.find_by_id(command.team_id)
        if not team:
            raise TeamNotFoundError(f"Team {command.team_id} not found")

        policy = LicensePolicy(
            expiration_type=command.expiration_type,
            expiration_start=command.expiration_start,
            expiration_days=command.expiration_days,
            expiration_date=command.expiration_date,
            suspended=command.suspended,
        )
        LicensePolicyValidator.validate(policy, now, creating=True)

        license_key = command.license_key or LicenseKeyGenerator.generate()
        if await self.license_repository.find_by_key(team.id, license_key):
            raise DuplicateLicenseKeyError(f"License key {license_key} already exists")

        license = License.create(
            team_id=team.id,
            license_key=license_key,
            policy=policy,
            now=now,
        )
        saved = await self.license_repository.save(license)

        licenses_created_total.labels(expiration_type=saved.expiration_type.value).inc()
        logger.info(
            "Created license %s for team %s (expiration %s, expires at %s)",
            saved.id,
            team.id,
            saved.expiration_type,
            saved.expiration_date,
        )

        await self.event_bus.publish(
            LicenseCreated(
                license_id=saved.id,
                team_id=saved.team_id,
                expiration_type=saved.expiration_type.value,
                expiration_date=saved.expiration_date,
                occurred_at=now,
            )
        )

        return LicenseDTO.from_entity(saved, saved.status(now, self.inactivity_window))
