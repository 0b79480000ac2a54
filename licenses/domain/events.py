"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class LicenseEvent(DomainEvent):
    """Base for events raised about a single license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        team_id: uuid.UUID,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize a license event.

        Args:
            license_id: License UUID
            team_id: Owning team UUID
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=self.new_id(),
            occurred_at=self.timestamp(occurred_at),
            aggregate_id=str(license_id),
            event_type=type(self).__name__,
        )
        self.license_id = license_id
        self._team_id = team_id

    def payload(self) -> Dict[str, Any]:
        """Return the license reference shared by all license events."""
        return {"license_id": str(self.license_id), "team_id": str(self.team_id)}


class LicenseCreated(LicenseEvent):
    """Event raised when a license is created."""

    webhook_name = "license.created"

    def __init__(
        self,
        license_id: uuid.UUID,
        team_id: uuid.UUID,
        expiration_type: str,
        expiration_date: Optional[datetime],
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_id, team_id, occurred_at)
        self.expiration_type = expiration_type
        self.expiration_date = expiration_date

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        data.update(
            expiration_type=self.expiration_type,
            expiration_date=_iso(self.expiration_date),
        )
        return data


class LicenseUpdated(LicenseEvent):
    """Event raised when a license expiration policy is updated."""

    webhook_name = "license.updated"

    def __init__(
        self,
        license_id: uuid.UUID,
        team_id: uuid.UUID,
        previous_expiration_date: Optional[datetime],
        expiration_date: Optional[datetime],
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_id, team_id, occurred_at)
        self.previous_expiration_date = previous_expiration_date
        self.expiration_date = expiration_date

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        data.update(
            previous_expiration_date=_iso(self.previous_expiration_date),
            expiration_date=_iso(self.expiration_date),
        )
        return data


class LicenseExpirationStarted(LicenseEvent):
    """Event raised when an activation-anchored license is first used."""

    webhook_name = "license.expiration_started"

    def __init__(
        self,
        license_id: uuid.UUID,
        team_id: uuid.UUID,
        expiration_date: datetime,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_id, team_id, occurred_at)
        self.expiration_date = expiration_date

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        data["expiration_date"] = _iso(self.expiration_date)
        return data


class LicenseSuspended(LicenseEvent):
    """Event raised when a license is suspended."""

    webhook_name = "license.suspended"


class LicenseResumed(LicenseEvent):
    """Event raised when a license is resumed."""

    webhook_name = "license.resumed"


class LicenseDeleted(LicenseEvent):
    """Event raised when an expired license is purged by cleanup."""

    webhook_name = "license.deleted"

    def __init__(
        self,
        license_id: uuid.UUID,
        team_id: uuid.UUID,
        expiration_date: Optional[datetime],
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_id, team_id, occurred_at)
        self.expiration_date = expiration_date

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        data["expiration_date"] = _iso(self.expiration_date)
        return data
