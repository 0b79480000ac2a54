"""
Django implementation of TeamRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from teams.domain.team import Team
from teams.infrastructure.models import Team as TeamModel
from teams.ports.team_repository import TeamRepository


class DjangoTeamRepository(TeamRepository):
    """Django ORM implementation of TeamRepository."""

    def _to_domain(self, model: TeamModel) -> Team:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Team model

        Returns:
            Team domain entity
        """
        return Team(
            id=model.id,
            name=model.name,
            expired_license_cleanup_days=model.expired_license_cleanup_days,
        )

    @sync_to_async
    def find_by_id(self, team_id: uuid.UUID) -> Optional[Team]:
        """
        Find a team by ID.

        Args:
            team_id: Team UUID

        Returns:
            Team entity or None if not found
        """
        try:
            return self._to_domain(TeamModel.objects.get(id=team_id))
        except TeamModel.DoesNotExist:
            return None

    @sync_to_async
    def list_all(self) -> List[Team]:
        """
        List all teams.

        Returns:
            List of Team entities
        """
        return [self._to_domain(model) for model in TeamModel.objects.all()]
