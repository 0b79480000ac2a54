"""
GetLicenseStatusQuery.

Query to get the current status classification of a license.
"""
import uuid
from dataclasses import dataclass


@dataclass
class GetLicenseStatusQuery:
    """Query to get the status of one license."""

    license_id: uuid.UUID
    team_id: uuid.UUID
