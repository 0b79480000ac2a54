"""
Team domain entity.

This is the core domain entity representing a team/tenant.
It contains business logic and is independent of infrastructure.
"""

import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Team:
    """
    Team domain entity.

    Represents a tenant that owns licenses.
    This is an immutable value object with business logic.
    """

    id: uuid.UUID
    name: str
    expired_license_cleanup_days: Optional[int] = None

    def __post_init__(self):
        """Validate team entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Team name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Team name too long")
        if self.expired_license_cleanup_days is not None and self.expired_license_cleanup_days < 1:
            raise ValueError("Cleanup days must be at least 1")

    @property
    def cleans_up_expired_licenses(self) -> bool:
        """True when the team has an expired-license retention window."""
        return self.expired_license_cleanup_days is not None
