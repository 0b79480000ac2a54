"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import secrets
import string
from datetime import datetime
from typing import Optional

from core.domain.exceptions import InvalidExpirationPolicyError
from core.domain.value_objects import ExpirationType
from licenses.domain.policy import LicensePolicy

MIN_EXPIRATION_DAYS = 1
MAX_EXPIRATION_DAYS = 1000


class LicenseKeyGenerator:
    """Domain service for license key generation."""

    @staticmethod
    def generate() -> str:
        """
        Generate a license key in format: XXXXX-XXXXX-XXXXX-XXXXX-XXXXX.

        Returns:
            Generated license key string
        """
        chars = string.ascii_uppercase + string.digits
        parts = ["".join(secrets.choice(chars) for _ in range(5)) for _ in range(5)]
        return "-".join(parts)


class LicensePolicyValidator:
    """
    Domain service for write-time validation of expiration policies.

    The expiration evaluator tolerates malformed policies by treating
    them as never expiring; this validator is what rejects them before
    they are stored.
    """

    @staticmethod
    def validate(
        policy: LicensePolicy,
        now: Optional[datetime] = None,
        creating: bool = True,
    ) -> None:
        """
        Validate an expiration policy.

        Args:
            policy: Policy to validate
            now: Current instant, required to check DATE policies on create
            creating: True when the policy belongs to a new license

        Raises:
            InvalidExpirationPolicyError: If the policy is malformed
        """
        if policy.expiration_type == ExpirationType.NEVER:
            if (
                policy.expiration_start is not None
                or policy.expiration_days is not None
                or policy.expiration_date is not None
            ):
                raise InvalidExpirationPolicyError(
                    "Licenses that never expire cannot have expiration settings",
                    field="expiration_type",
                )
            return

        if policy.expiration_type == ExpirationType.DURATION:
            if policy.expiration_start is None:
                raise InvalidExpirationPolicyError(
                    "Expiration start is required for duration licenses",
                    field="expiration_start",
                )
            if policy.expiration_days is None:
                raise InvalidExpirationPolicyError(
                    "Expiration days are required for duration licenses",
                    field="expiration_days",
                )
            if not MIN_EXPIRATION_DAYS <= policy.expiration_days <= MAX_EXPIRATION_DAYS:
                raise InvalidExpirationPolicyError(
                    f"Expiration days must be between {MIN_EXPIRATION_DAYS} "
                    f"and {MAX_EXPIRATION_DAYS}",
                    field="expiration_days",
                )
            return

        # DATE
        if policy.expiration_date is None:
            raise InvalidExpirationPolicyError(
                "Expiration date is required for date licenses",
                field="expiration_date",
            )
        if creating and now is not None and policy.expiration_date <= now:
            raise InvalidExpirationPolicyError(
                "Expiration date must be in the future",
                field="expiration_date",
            )
