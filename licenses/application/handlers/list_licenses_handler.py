"""
ListLicensesHandler.

Handler for listing a team's licenses by status.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from django.utils import timezone

from licenses.application.config import get_inactivity_window
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.ports.license_repository import LicenseRepository


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        inactivity_window: Optional[timedelta] = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.inactivity_window = inactivity_window or get_inactivity_window()

    async def handle(
        self, query: ListLicensesQuery, now: Optional[datetime] = None
    ) -> List[LicenseDTO]:
        """
        Handle list licenses query.

        Args:
            query: ListLicensesQuery
            now: Evaluation instant (defaults to the current time)

        Returns:
            List of LicenseDTO, each labelled with its status at ``now``
        """
        now = now or timezone.now()

        licenses = await self.license_repository.list_by_team(
            query.team_id, query.status, now, self.inactivity_window
        )
        return [
            LicenseDTO.from_entity(license, license.status(now, self.inactivity_window))
            for license in licenses
        ]
