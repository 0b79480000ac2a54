"""
Expired license cleanup.

Deletes licenses that have been expired for longer than their team's
retention window (``Team.expired_license_cleanup_days``).
"""
import logging
import time
import uuid
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.domain.events import EventBus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_purged_total
from licenses.application.dto.license_dto import CleanupSummaryDTO
from licenses.domain.events import LicenseDeleted
from licenses.domain.expiration import is_past_retention, retention_cutoff
from licenses.ports.license_repository import LicenseRepository
from teams.ports.team_repository import TeamRepository

logger = logging.getLogger(__name__)


class ExpiredLicenseCleanupService:
    """Service that purges licenses past their team's retention window."""

    def __init__(
        self,
        team_repository: TeamRepository,
        license_repository: LicenseRepository,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize service with repositories."""
        self.team_repository = team_repository
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus

    async def run(
        self, now: Optional[datetime] = None, dry_run: bool = False
    ) -> CleanupSummaryDTO:
        """
        Run one cleanup pass over all teams.

        A failure for one team is logged and recorded in the summary;
        the remaining teams are still processed.

        Args:
            now: Evaluation instant (defaults to the current time)
            dry_run: Report what would be deleted without deleting

        Returns:
            CleanupSummaryDTO
        """
        now = now or timezone.now()
        cleanup_id = uuid.uuid4()
        started = time.monotonic()
        summary = CleanupSummaryDTO(
            teams_processed=0, licenses_deleted=0, dry_run=dry_run, errors=[]
        )

        teams = await self.team_repository.list_all()
        logger.info(
            "Starting expired license cleanup",
            extra={"cleanup_id": str(cleanup_id), "teams_found": len(teams), "dry_run": dry_run},
        )

        for team in teams:
            if not team.cleans_up_expired_licenses:
                continue
            summary.teams_processed += 1

            try:
                deleted = await self._cleanup_team(team, now, dry_run)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(
                    "Expired license cleanup failed for team %s: %s",
                    team.id,
                    e,
                    exc_info=True,
                )
                summary.errors.append({"team_id": str(team.id), "error": str(e)})
                continue

            summary.licenses_deleted += deleted

        logger.info(
            "Finished expired license cleanup",
            extra={
                "cleanup_id": str(cleanup_id),
                "teams_processed": summary.teams_processed,
                "licenses_deleted": summary.licenses_deleted,
                "errors": len(summary.errors),
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return summary

    async def _cleanup_team(self, team, now: datetime, dry_run: bool) -> int:
        retention_days = team.expired_license_cleanup_days
        cutoff = retention_cutoff(now, retention_days)

        candidates = await self.license_repository.list_expiring_before(team.id, cutoff)
        purgeable = [
            license
            for license in candidates
            if is_past_retention(license.policy, license.expiration_date, retention_days, now)
        ]

        logger.info(
            "Team %s: %d expired license(s) past %d day retention (cutoff %s)",
            team.id,
            len(purgeable),
            retention_days,
            cutoff.isoformat(),
        )
        if dry_run or not purgeable:
            return len(purgeable)

        deleted = await self.license_repository.delete_many([license.id for license in purgeable])
        licenses_purged_total.inc(deleted)

        for license in purgeable:
            await self.event_bus.publish(
                LicenseDeleted(
                    license_id=license.id,
                    team_id=team.id,
                    expiration_date=license.expiration_date,
                    occurred_at=now,
                )
            )
        return deleted
