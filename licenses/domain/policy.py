"""
LicensePolicy value object.

A read-only view over the expiration-related fields of a license.
It is derived fresh for every evaluation and never persisted on its own.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from core.domain.value_objects import ExpirationStart, ExpirationType

if TYPE_CHECKING:
    from licenses.domain.license import License


@dataclass(frozen=True)
class LicensePolicy:
    """
    Expiration policy snapshot of a license.

    Only one of the following is meaningful at any time:
    - DATE: ``expiration_date``
    - DURATION: ``expiration_days`` and ``expiration_start``
    - NEVER: none of them
    """

    expiration_type: ExpirationType
    expiration_start: Optional[ExpirationStart] = None
    expiration_days: Optional[int] = None
    expiration_date: Optional[datetime] = None
    suspended: bool = False
    created_at: Optional[datetime] = None
    first_activated_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None

    @classmethod
    def from_license(cls, license: "License") -> "LicensePolicy":
        """
        Build a policy snapshot from a License entity.

        Args:
            license: License domain entity

        Returns:
            LicensePolicy view over the license fields
        """
        return cls(
            expiration_type=license.expiration_type,
            expiration_start=license.expiration_start,
            expiration_days=license.expiration_days,
            expiration_date=license.expiration_date,
            suspended=license.suspended,
            created_at=license.created_at,
            first_activated_at=license.first_activated_at,
            last_active_at=license.last_active_at,
        )

    @property
    def is_duration(self) -> bool:
        return self.expiration_type == ExpirationType.DURATION

    @property
    def starts_on_creation(self) -> bool:
        return self.is_duration and self.expiration_start == ExpirationStart.CREATION

    @property
    def starts_on_activation(self) -> bool:
        return self.is_duration and self.expiration_start == ExpirationStart.ACTIVATION
