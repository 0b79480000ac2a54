"""
License expiration evaluation.

Pure functions that resolve when a license expires and how it is
classified at a given instant. Every consumer (license create/update,
validation, listing filters, cleanup) goes through this module so the
rules are computed identically everywhere.

None of these functions read the clock: ``now`` is always passed in.
None of them raise: a policy missing a required field, or one whose
duration runs past the last representable date, is treated as never
expiring, and rejecting such policies is left to
``LicensePolicyValidator`` at write time.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from core.domain.value_objects import LicenseStatus
from licenses.domain.policy import LicensePolicy

INACTIVITY_WINDOW = timedelta(days=30)


@dataclass(frozen=True)
class ValidityCheck:
    """Outcome of checking a license at validation time."""

    is_valid: bool
    reason: Optional[LicenseStatus] = None
    expired_at: Optional[datetime] = None


def shift_instant(instant: datetime, delta: timedelta) -> Optional[datetime]:
    """
    Move ``instant`` by ``delta``, or None past the representable range.

    Out-of-range arithmetic means the bound lies beyond any date the
    calendar can hold.
    """
    try:
        return instant + delta
    except OverflowError:
        return None


def _add_days(anchor: Optional[datetime], days: Optional[int]) -> Optional[datetime]:
    if anchor is None or not days or days <= 0:
        return None
    try:
        delta = timedelta(days=days)
    except OverflowError:
        return None
    return shift_instant(anchor, delta)


def compute_expiration_date_on_create(
    policy: LicensePolicy, now: datetime
) -> Optional[datetime]:
    """
    Resolve the expiration instant for a license being created.

    Args:
        policy: Policy of the new license
        now: Creation instant

    Returns:
        Absolute expiration instant, or None if the license does not
        (yet) expire
    """
    if not policy.expiration_type.expires:
        return None
    if not policy.is_duration:
        return policy.expiration_date
    if policy.starts_on_creation:
        return _add_days(now, policy.expiration_days)
    # ACTIVATION (or a missing start): resolved on first use
    return None


def compute_expiration_date_on_update(
    policy: LicensePolicy, existing_license, now: datetime
) -> Optional[datetime]:
    """
    Resolve the expiration instant for a license being updated.

    DURATION licenses are anchored to when the license was created (or
    first activated), so editing ``expiration_days`` never restarts the
    clock at the moment of the edit. ``now`` does not move the anchor.

    Args:
        policy: Policy as submitted by the update
        existing_license: License as currently stored (may be None)
        now: Update instant

    Returns:
        Absolute expiration instant, or None if the license does not
        (yet) expire
    """
    if not policy.expiration_type.expires:
        return None
    if not policy.is_duration:
        return policy.expiration_date

    created_at = getattr(existing_license, "created_at", None) or policy.created_at
    first_activated_at = (
        getattr(existing_license, "first_activated_at", None) or policy.first_activated_at
    )

    if policy.starts_on_creation:
        return _add_days(created_at, policy.expiration_days)
    if policy.starts_on_activation:
        return _add_days(first_activated_at, policy.expiration_days)
    return None


def start_expiration_on_activation(
    policy: LicensePolicy,
    resolved_expiration_date: Optional[datetime],
    activated_at: datetime,
) -> Optional[datetime]:
    """
    Resolve a DURATION/ACTIVATION license on its first use.

    A license that already has a resolved date keeps it: the clock
    starts only once.

    Args:
        policy: License policy
        resolved_expiration_date: Currently stored expiration instant
        activated_at: Instant of the activation being recorded

    Returns:
        Expiration instant after the activation
    """
    if resolved_expiration_date is not None or not policy.starts_on_activation:
        return resolved_expiration_date
    return _add_days(activated_at, policy.expiration_days)


def is_expired(
    policy: LicensePolicy, resolved_expiration_date: Optional[datetime], now: datetime
) -> bool:
    """A license is expired at and after its expiration instant."""
    if not policy.expiration_type.expires or resolved_expiration_date is None:
        return False
    return resolved_expiration_date <= now


def classify_status(
    policy: LicensePolicy,
    resolved_expiration_date: Optional[datetime],
    last_active_at: Optional[datetime],
    now: datetime,
    inactivity_window: timedelta = INACTIVITY_WINDOW,
) -> LicenseStatus:
    """
    Classify a license for display and filtering.

    Precedence, first match wins:

    1. suspended -> SUSPENDED
    2. expiring type, resolved date at or before now -> EXPIRED
    3. expiring type, resolved date within ``inactivity_window`` -> EXPIRING
    4. never active, or last active at or before now - window -> INACTIVE
    5. otherwise -> ACTIVE

    Args:
        policy: License policy
        resolved_expiration_date: Stored expiration instant
        last_active_at: Last validation instant
        now: Evaluation instant
        inactivity_window: Width of the "expiring" and "inactive" windows

    Returns:
        LicenseStatus
    """
    if policy.suspended:
        return LicenseStatus.SUSPENDED

    if is_expired(policy, resolved_expiration_date, now):
        return LicenseStatus.EXPIRED

    if policy.expiration_type.expires and resolved_expiration_date is not None:
        # No representable horizon: every future date is inside the window
        horizon = shift_instant(now, inactivity_window)
        if horizon is None or resolved_expiration_date <= horizon:
            return LicenseStatus.EXPIRING

    if last_active_at is None:
        return LicenseStatus.INACTIVE
    inactive_before = shift_instant(now, -inactivity_window)
    if inactive_before is not None and last_active_at <= inactive_before:
        return LicenseStatus.INACTIVE

    return LicenseStatus.ACTIVE


def check_validity(
    policy: LicensePolicy, resolved_expiration_date: Optional[datetime], now: datetime
) -> ValidityCheck:
    """
    Decide whether a license may be used at ``now``.

    Args:
        policy: License policy
        resolved_expiration_date: Stored expiration instant
        now: Validation instant

    Returns:
        ValidityCheck with the rejection reason when invalid
    """
    if policy.suspended:
        return ValidityCheck(is_valid=False, reason=LicenseStatus.SUSPENDED)
    if is_expired(policy, resolved_expiration_date, now):
        return ValidityCheck(
            is_valid=False,
            reason=LicenseStatus.EXPIRED,
            expired_at=resolved_expiration_date,
        )
    return ValidityCheck(is_valid=True)


def retention_cutoff(now: datetime, retention_days: int) -> datetime:
    """Instant before which expired licenses are purged."""
    return now - timedelta(days=retention_days)


def is_past_retention(
    policy: LicensePolicy,
    resolved_expiration_date: Optional[datetime],
    retention_days: Optional[int],
    now: datetime,
) -> bool:
    """
    Decide whether an expired license has outlived the retention window.

    Args:
        policy: License policy
        resolved_expiration_date: Stored expiration instant
        retention_days: Days to keep expired licenses (None or 0 disables)
        now: Evaluation instant

    Returns:
        True if the license should be purged
    """
    if not retention_days or retention_days <= 0:
        return False
    if not policy.expiration_type.expires or resolved_expiration_date is None:
        return False
    return resolved_expiration_date < retention_cutoff(now, retention_days)
