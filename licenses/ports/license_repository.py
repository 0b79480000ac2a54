"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import List, Optional
import uuid

from core.domain.value_objects import LicenseStatus
from licenses.domain.expiration import INACTIVITY_WINDOW
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        pass

    @abstractmethod
    async def record_activity(
        self, license_id: uuid.UUID, now: datetime
    ) -> Optional[License]:
        """
        Record a successful validation of a license.

        Only the activity of the stored license changes; its policy and
        suspension are kept as stored.

        Args:
            license_id: License UUID
            now: Validation instant

        Returns:
            Updated license entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key(
        self, team_id: uuid.UUID, license_key: str
    ) -> Optional[License]:
        """
        Find a license by its key within a team.

        Args:
            team_id: Team UUID
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def list_by_team(
        self,
        team_id: uuid.UUID,
        status: Optional[LicenseStatus],
        now: datetime,
        inactivity_window: timedelta = INACTIVITY_WINDOW,
    ) -> List[License]:
        """
        List a team's licenses, optionally only those with a given status.

        Args:
            team_id: Team UUID
            status: Status to filter by (None for all)
            now: Evaluation instant for the status filter
            inactivity_window: Expiring/inactive window width

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def list_expiring_before(
        self, team_id: uuid.UUID, cutoff: datetime
    ) -> List[License]:
        """
        List a team's licenses with an expiring policy that expired before a cutoff.

        Args:
            team_id: Team UUID
            cutoff: Exclusive upper bound for the resolved expiration date

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def delete_many(self, license_ids: List[uuid.UUID]) -> int:
        """
        Delete licenses in one transaction.

        Args:
            license_ids: License UUIDs

        Returns:
            Number of deleted licenses
        """
        pass
