"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from core.domain.value_objects import ExpirationStart, ExpirationType, LicenseStatus
from licenses.domain.expiration import (
    INACTIVITY_WINDOW,
    ValidityCheck,
    check_validity,
    classify_status,
    compute_expiration_date_on_create,
    compute_expiration_date_on_update,
    start_expiration_on_activation,
)
from licenses.domain.policy import LicensePolicy


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Represents a license issued by a team. ``expiration_date`` holds the
    resolved absolute expiration instant, not the raw user input.
    This is an immutable value object with business logic.
    """

    id: uuid.UUID
    team_id: uuid.UUID
    license_key: str
    expiration_type: ExpirationType
    expiration_start: Optional[ExpirationStart]
    expiration_days: Optional[int]
    expiration_date: Optional[datetime]
    suspended: bool
    first_activated_at: Optional[datetime]
    last_active_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate license entity."""
        if not self.team_id:
            raise ValueError("Team ID is required")
        if not self.license_key or len(self.license_key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if len(self.license_key) > 255:
            raise ValueError("License key too long")

    @classmethod
    def create(
        cls,
        team_id: uuid.UUID,
        license_key: str,
        policy: LicensePolicy,
        now: datetime,
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new License entity.

        Args:
            team_id: Owning team UUID
            license_key: License key string
            policy: Requested expiration policy
            now: Creation instant
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance with its expiration resolved
        """
        return cls(
            id=license_id or uuid.uuid4(),
            team_id=team_id,
            license_key=license_key,
            expiration_type=policy.expiration_type,
            expiration_start=policy.expiration_start,
            expiration_days=policy.expiration_days,
            expiration_date=compute_expiration_date_on_create(policy, now),
            suspended=policy.suspended,
            first_activated_at=None,
            last_active_at=None,
            created_at=now,
            updated_at=now,
        )

    @property
    def policy(self) -> LicensePolicy:
        """Expiration policy snapshot of this license."""
        return LicensePolicy.from_license(self)

    def status(
        self, now: datetime, inactivity_window: timedelta = INACTIVITY_WINDOW
    ) -> LicenseStatus:
        """
        Classify this license at ``now``.

        Args:
            now: Evaluation instant
            inactivity_window: Expiring/inactive window width

        Returns:
            LicenseStatus
        """
        return classify_status(
            self.policy,
            self.expiration_date,
            self.last_active_at,
            now,
            inactivity_window,
        )

    def check_validity(self, now: datetime) -> ValidityCheck:
        """Check whether the license may be used at ``now``."""
        return check_validity(self.policy, self.expiration_date, now)

    def with_policy(self, policy: LicensePolicy, now: datetime) -> "License":
        """
        Create a new License instance with an updated expiration policy.

        Args:
            policy: Policy as submitted by the update
            now: Update instant

        Returns:
            New License instance with the expiration re-resolved
        """
        return replace(
            self,
            expiration_type=policy.expiration_type,
            expiration_start=policy.expiration_start,
            expiration_days=policy.expiration_days,
            expiration_date=compute_expiration_date_on_update(policy, self, now),
            suspended=policy.suspended,
            updated_at=now,
        )

    def record_activity(self, now: datetime) -> "License":
        """
        Create a new License instance after a successful validation.

        Sets the first activation once, bumps ``last_active_at`` and starts
        the expiration clock of DURATION/ACTIVATION licenses.

        Args:
            now: Validation instant

        Returns:
            New License instance
        """
        return replace(
            self,
            expiration_date=start_expiration_on_activation(
                self.policy, self.expiration_date, now
            ),
            first_activated_at=self.first_activated_at or now,
            last_active_at=now,
            updated_at=now,
        )

    def suspend(self, now: datetime) -> "License":
        """
        Create a new License instance with suspended flag set.

        Returns:
            New suspended License instance
        """
        if self.suspended:
            raise ValueError("License is already suspended")
        return replace(self, suspended=True, updated_at=now)

    def resume(self, now: datetime) -> "License":
        """
        Create a new License instance with suspended flag cleared.

        Returns:
            New resumed License instance
        """
        if not self.suspended:
            raise ValueError("Can only resume a suspended license")
        return replace(self, suspended=False, updated_at=now)
