"""
CreateLicenseCommand.

Command to create a license for a team.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import ExpirationStart, ExpirationType


@dataclass
class CreateLicenseCommand:
    """
    Command to create a license.

    ``expiration_date`` is only meaningful for DATE licenses;
    ``expiration_start`` and ``expiration_days`` only for DURATION ones.
    """

    team_id: uuid.UUID
    expiration_type: ExpirationType = ExpirationType.NEVER
    expiration_start: Optional[ExpirationStart] = None
    expiration_days: Optional[int] = None
    expiration_date: Optional[datetime] = None
    suspended: bool = False
    license_key: Optional[str] = None  # Generated if not provided
