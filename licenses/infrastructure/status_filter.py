"""
ORM query filters for license status.

Translates the precedence of ``licenses.domain.expiration.classify_status``
into Django ``Q`` objects so list filtering in the database agrees with
the status the evaluator assigns to each row.
"""
from datetime import datetime, timedelta

from django.db.models import Q

from core.domain.value_objects import ExpirationType, LicenseStatus
from licenses.domain.expiration import INACTIVITY_WINDOW, shift_instant

EXPIRING_TYPES = [ExpirationType.DATE.value, ExpirationType.DURATION.value]


def license_status_q(
    status: LicenseStatus,
    now: datetime,
    inactivity_window: timedelta = INACTIVITY_WINDOW,
) -> Q:
    """
    Build the filter selecting licenses classified as ``status`` at ``now``.

    Args:
        status: Status to select
        now: Evaluation instant
        inactivity_window: Expiring/inactive window width

    Returns:
        Q object for License querysets
    """
    if status == LicenseStatus.SUSPENDED:
        return Q(suspended=True)

    not_suspended = Q(suspended=False)
    has_expiration = Q(expiration_type__in=EXPIRING_TYPES, expiration_date__isnull=False)
    window_end = shift_instant(now, inactivity_window)

    if status == LicenseStatus.EXPIRED:
        return not_suspended & has_expiration & Q(expiration_date__lte=now)

    in_window = Q(expiration_date__gt=now)
    if window_end is not None:
        in_window &= Q(expiration_date__lte=window_end)

    if status == LicenseStatus.EXPIRING:
        return not_suspended & has_expiration & in_window

    # Neither expired nor expiring: activity decides
    outside_window = ~Q(expiration_type__in=EXPIRING_TYPES) | Q(expiration_date__isnull=True)
    if window_end is not None:
        outside_window |= Q(expiration_date__gt=window_end)

    active_since = shift_instant(now, -inactivity_window)
    if active_since is None:
        idle = Q(last_active_at__isnull=True)
        recent = Q(last_active_at__isnull=False)
    else:
        idle = Q(last_active_at__isnull=True) | Q(last_active_at__lte=active_since)
        recent = Q(last_active_at__gt=active_since)

    if status == LicenseStatus.INACTIVE:
        return not_suspended & outside_window & idle

    return not_suspended & outside_window & recent
