"""
ValidateLicenseCommand.

Command issued by validation traffic from a licensed client.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ValidateLicenseCommand:
    """Command to validate a license key and record the activity."""

    team_id: uuid.UUID
    license_key: str
