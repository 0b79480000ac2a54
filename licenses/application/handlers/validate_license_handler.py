"""
ValidateLicenseHandler.

Handles validation traffic: checks a license and records the activity.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from django.utils import timezone

from core.domain.events import EventBus
from core.domain.exceptions import InvalidLicenseKeyError
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import license_validations_total
from licenses.application.commands.validate_license import ValidateLicenseCommand
from licenses.application.config import get_inactivity_window
from licenses.application.dto.license_dto import ValidationResultDTO
from licenses.domain.events import LicenseExpirationStarted
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ValidateLicenseHandler:
    """Handler for ValidateLicenseCommand."""

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
        self, command: ValidateLicenseCommand, now: Optional[datetime] = None
    ) -> ValidationResultDTO:
        """
        Handle validate license command.

        A suspended or expired license is rejected and its activity is not
        recorded. A valid license gets ``last_active_at`` bumped, and an
        activation-anchored DURATION license starts expiring on first use.

        Args:
            command: ValidateLicenseCommand
            now: Validation instant (defaults to the current time)

        Returns:
            ValidationResultDTO

        Raises:
            InvalidLicenseKeyError: If no license has this key in the team
        """
        now = now or timezone.now()

        license = await self.license_repository.find_by_key(command.team_id, command.license_key)
        if not license:
            license_validations_total.labels(outcome="invalid_key").inc()
            raise InvalidLicenseKeyError("Invalid license key")

        check = license.check_validity(now)
        if not check.is_valid:
            license_validations_total.labels(outcome=check.reason.value.lower()).inc()
            logger.info("Rejected validation of license %s: %s", license.id, check.reason)
            return ValidationResultDTO(
                license_key=license.license_key,
                is_valid=False,
                status=license.status(now, self.inactivity_window).value,
                reason=check.reason.value,
                expiration_date=license.expiration_date,
                expired_at=check.expired_at,
            )

        saved = await self.license_repository.record_activity(license.id, now)
        if saved is None:
            license_validations_total.labels(outcome="invalid_key").inc()
            raise InvalidLicenseKeyError("Invalid license key")
        license_validations_total.labels(outcome="valid").inc()

        if license.expiration_date is None and saved.expiration_date is not None:
            logger.info(
                "License %s started expiring on first activation, expires at %s",
                saved.id,
                saved.expiration_date,
            )
            await self.event_bus.publish(
                LicenseExpirationStarted(
                    license_id=saved.id,
                    team_id=saved.team_id,
                    expiration_date=saved.expiration_date,
                    occurred_at=now,
                )
            )

        return ValidationResultDTO(
            license_key=saved.license_key,
            is_valid=True,
            status=saved.status(now, self.inactivity_window).value,
            expiration_date=saved.expiration_date,
        )
