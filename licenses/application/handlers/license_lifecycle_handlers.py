"""
License lifecycle handlers.

Handlers for suspend and resume license commands.
"""
import logging
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.domain.events import EventBus
from core.domain.exceptions import InvalidLicenseStatusError, LicenseNotFoundError
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_suspended_total
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.domain.events import LicenseResumed, LicenseSuspended
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class _LifecycleHandler:
    """Shared lookup for lifecycle handlers."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus

    async def _load(self, license_id, team_id) -> License:
        license = await self.license_repository.find_by_id(license_id)
        if not license or license.team_id != team_id:
            raise LicenseNotFoundError(f"License {license_id} not found")
        return license


class SuspendLicenseHandler(_LifecycleHandler):
    """Handler for SuspendLicenseCommand."""

    async def handle(
        self, command: SuspendLicenseCommand, now: Optional[datetime] = None
    ) -> License:
        """
        Handle suspend license command.

        Args:
            command: SuspendLicenseCommand
            now: Suspension instant (defaults to the current time)

        Returns:
            Suspended License entity

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If license is already suspended
        """
        now = now or timezone.now()
        license = await self._load(command.license_id, command.team_id)

        try:
            suspended = license.suspend(now)
        except ValueError as e:
            raise InvalidLicenseStatusError(str(e)) from e

        saved = await self.license_repository.save(suspended)
        licenses_suspended_total.inc()
        logger.info("Suspended license %s (reason: %s)", saved.id, command.reason or "-")

        await self.event_bus.publish(
            LicenseSuspended(license_id=saved.id, team_id=saved.team_id, occurred_at=now)
        )
        return saved


class ResumeLicenseHandler(_LifecycleHandler):
    """Handler for ResumeLicenseCommand."""

    async def handle(
        self, command: ResumeLicenseCommand, now: Optional[datetime] = None
    ) -> License:
        """
        Handle resume license command.

        Args:
            command: ResumeLicenseCommand
            now: Resume instant (defaults to the current time)

        Returns:
            Resumed License entity

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If license is not suspended
        """
        now = now or timezone.now()
        license = await self._load(command.license_id, command.team_id)

        try:
            resumed = license.resume(now)
        except ValueError as e:
            raise InvalidLicenseStatusError(str(e)) from e

        saved = await self.license_repository.save(resumed)
        logger.info("Resumed license %s", saved.id)

        await self.event_bus.publish(
            LicenseResumed(license_id=saved.id, team_id=saved.team_id, occurred_at=now)
        )
        return saved
