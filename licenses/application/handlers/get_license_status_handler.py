"""
GetLicenseStatusHandler.

Handler for getting license status query.
"""

from datetime import datetime, timedelta
from typing import Optional

from django.utils import timezone

from core.domain.exceptions import LicenseNotFoundError
from licenses.application.config import get_inactivity_window
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.queries.get_license_status import GetLicenseStatusQuery
from licenses.ports.license_repository import LicenseRepository


class GetLicenseStatusHandler:
    """Handler for GetLicenseStatusQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        inactivity_window: Optional[timedelta] = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.inactivity_window = inactivity_window or get_inactivity_window()

    async def handle(
        self, query: GetLicenseStatusQuery, now: Optional[datetime] = None
    ) -> LicenseDTO:
        """
        Handle get license status query.

        Args:
            query: GetLicenseStatusQuery
            now: Evaluation instant (defaults to the current time)

        Returns:
            LicenseDTO with the current status classification

        Raises:
            LicenseNotFoundError: If license not found for the team
        """
        now = now or timezone.now()

        license = await self.license_repository.find_by_id(query.license_id)
        if not license or license.team_id != query.team_id:
            raise LicenseNotFoundError(f"License {query.license_id} not found")

        return LicenseDTO.from_entity(license, license.status(now, self.inactivity_window))
