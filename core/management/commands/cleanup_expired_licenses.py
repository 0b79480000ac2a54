"""
Django management command to purge licenses past their team's retention.

This command should be run periodically (e.g., via cron or Celery beat).
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from licenses.application.services.cleanup import ExpiredLicenseCleanupService
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from teams.infrastructure.repositories.django_team_repository import DjangoTeamRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to delete licenses that expired longer ago than the team allows."""

    help = "Delete expired licenses past each team's retention window"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - report without deleting licenses",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        dry_run = options["dry_run"]
        service = ExpiredLicenseCleanupService(
            team_repository=DjangoTeamRepository(),
            license_repository=DjangoLicenseRepository(),
        )

        if dry_run:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No licenses will be deleted"))

        summary = async_to_sync(service.run)(dry_run=dry_run)

        verb = "Would delete" if dry_run else "Deleted"
        self.stdout.write(
            f"{verb} {summary.licenses_deleted} license(s) across "
            f"{summary.teams_processed} team(s)"
        )
        for error in summary.errors:
            # pylint: disable=no-member
            self.stderr.write(self.style.ERROR(f"Team {error['team_id']}: {error['error']}"))

        if not summary.errors:
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS("Cleanup finished"))
