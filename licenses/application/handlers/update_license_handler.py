"""
UpdateLicenseHandler.

Handles the update license command.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from django.utils import timezone

from core.domain.events import EventBus
from core.domain.exceptions import LicenseNotFoundError
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_updated_total
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.config import get_inactivity_window
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import LicenseResumed, LicenseSuspended, LicenseUpdated
from licenses.domain.policy import LicensePolicy
from licenses.domain.services import LicensePolicyValidator
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class UpdateLicenseHandler:
    """Handler for UpdateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        event_bus: Optional[EventBus] = None,
        inactivity_window: Optional[timedelta] = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus
        self.inactivity_window = inactivity_window or get_inactivity_window()

    async def handle(
        self, command: UpdateLicenseCommand, now: Optional[datetime] = None
    ) -> LicenseDTO:
        """
        Handle update license command.

        DURATION licenses keep their original anchor: changing
        ``expiration_days`` re-resolves the date from creation (or first
        activation), not from the moment of the update.

        Args:
            command: UpdateLicenseCommand
            now: Update instant (defaults to the current time)

        Returns:
            LicenseDTO of the updated license

        Raises:
            LicenseNotFoundError: If license not found for the team
            InvalidExpirationPolicyError: If the expiration policy is malformed
        """
        now = now or timezone.now()

        license = await self.license_repository.find_by_id(command.license_id)
        if not license or license.team_id != command.team_id:
            raise LicenseNotFoundError(f"License {command.license_id} not found")

        policy = LicensePolicy(
            expiration_type=command.expiration_type,
            expiration_start=command.expiration_start,
            expiration_days=command.expiration_days,
            expiration_date=command.expiration_date,
            suspended=command.suspended,
        )
        LicensePolicyValidator.validate(policy, now, creating=False)

        saved = await self.license_repository.save(license.with_policy(policy, now))

        licenses_updated_total.labels(expiration_type=saved.expiration_type.value).inc()
        logger.info(
            "Updated license %s expiration: %s -> %s",
            saved.id,
            license.expiration_date,
            saved.expiration_date,
        )

        await self.event_bus.publish(
            LicenseUpdated(
                license_id=saved.id,
                team_id=saved.team_id,
                previous_expiration_date=license.expiration_date,
                expiration_date=saved.expiration_date,
                occurred_at=now,
            )
        )
        if saved.suspended != license.suspended:
            event_class = LicenseSuspended if saved.suspended else LicenseResumed
            await self.event_bus.publish(
                event_class(license_id=saved.id, team_id=saved.team_id, occurred_at=now)
            )

        return LicenseDTO.from_entity(saved, saved.status(now, self.inactivity_window))
