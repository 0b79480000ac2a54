"""
Runtime settings used by the license application layer.
"""
from datetime import timedelta

from django.conf import settings

from licenses.domain.expiration import INACTIVITY_WINDOW


def get_inactivity_window() -> timedelta:
    """Return the configured expiring/inactive window."""
    days = getattr(settings, "LICENSE_INACTIVITY_WINDOW_DAYS", None)
    if not days:
        return INACTIVITY_WINDOW
    return timedelta(days=days)
