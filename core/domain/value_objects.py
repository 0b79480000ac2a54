"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from enum import Enum


class ExpirationType(Enum):
    """How a license expires."""

    NEVER = "NEVER"
    DATE = "DATE"
    DURATION = "DURATION"

    def __str__(self) -> str:
        """Return expiration type as string."""
        return self.value

    @property
    def expires(self) -> bool:
        """True for types that carry a resolved expiration date."""
        return self in (ExpirationType.DATE, ExpirationType.DURATION)


class ExpirationStart(Enum):
    """Anchor of a DURATION expiration."""

    CREATION = "CREATION"
    ACTIVATION = "ACTIVATION"

    def __str__(self) -> str:
        """Return expiration start as string."""
        return self.value


class LicenseStatus(Enum):
    """Display/filter classification of a license."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRING = "EXPIRING"
    EXPIRED = "EXPIRED"
    SUSPENDED = "SUSPENDED"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class WebhookDeliveryStatus(Enum):
    """Delivery state of a single webhook event."""

    PENDING = "PENDING"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"

    def __str__(self) -> str:
        """Return delivery status as string."""
        return self.value
