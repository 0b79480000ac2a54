"""
Team repository port (interface).

This defines the contract for team lookup operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from teams.domain.team import Team


class TeamRepository(ABC):
    """
    Abstract repository for Team entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_id(self, team_id: uuid.UUID) -> Optional[Team]:
        """
        Find a team by ID.

        Args:
            team_id: Team UUID

        Returns:
            Team entity or None if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Team]:
        """
        List all teams.

        Returns:
            List of Team entities
        """
        pass
