"""
UpdateLicenseCommand.

Command to change the expiration policy of a license.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import ExpirationStart, ExpirationType


@dataclass
class UpdateLicenseCommand:
    """Command to replace the expiration policy of an existing license."""

    license_id: uuid.UUID
    team_id: uuid.UUID
    expiration_type: ExpirationType
    expiration_start: Optional[ExpirationStart] = None
    expiration_days: Optional[int] = None
    expiration_date: Optional[datetime] = None
    suspended: bool = False
