"""
License DTOs returned by application handlers.
"""
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    team_id: uuid.UUID
    license_key: str
    status: str
    expiration_type: str
    expiration_start: Optional[str]
    expiration_days: Optional[int]
    expiration_date: Optional[datetime]
    suspended: bool
    last_active_at: Optional[datetime]
    created_at: datetime

    @classmethod
    def from_entity(cls, license, status) -> "LicenseDTO":
        """Build a DTO from a License entity and its classification."""
        return cls(
            id=license.id,
            team_id=license.team_id,
            license_key=license.license_key,
            status=status.value,
            expiration_type=license.expiration_type.value,
            expiration_start=(
                license.expiration_start.value if license.expiration_start else None
            ),
            expiration_days=license.expiration_days,
            expiration_date=license.expiration_date,
            suspended=license.suspended,
            last_active_at=license.last_active_at,
            created_at=license.created_at,
        )


@dataclass
class ValidationResultDTO:
    """DTO for the outcome of a license validation."""

    license_key: str
    is_valid: bool
    status: str
    reason: Optional[str] = None  # SUSPENDED or EXPIRED when invalid
    expiration_date: Optional[datetime] = None
    expired_at: Optional[datetime] = None


@dataclass
class CleanupSummaryDTO:
    """DTO summarising one expired-license cleanup run."""

    teams_processed: int
    licenses_deleted: int
    dry_run: bool
    errors: list

    def to_dict(self) -> dict:
        """Convert summary to a JSON-serializable dictionary."""
        return asdict(self)
