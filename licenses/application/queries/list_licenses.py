"""
ListLicensesQuery.

Query to list a team's licenses, optionally filtered by status.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import LicenseStatus


@dataclass
class ListLicensesQuery:
    """Query to list licenses of a team."""

    team_id: uuid.UUID
    status: Optional[LicenseStatus] = None  # None lists all licenses
