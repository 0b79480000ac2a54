"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class InvalidLicenseKeyError(LicenseException):
    """Raised when a license key is invalid."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="INVALID_LICENSE_KEY")


class DuplicateLicenseKeyError(LicenseException):
    """Raised when a team already has a license with the requested key."""

    def __init__(self, message: str = "License key already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE_KEY")


class InvalidExpirationPolicyError(LicenseException):
    """Raised when a license expiration policy is malformed."""

    def __init__(self, message: str = "Invalid expiration policy", field: str = None):
        super().__init__(message, code="INVALID_EXPIRATION_POLICY")
        self.field = field


class InvalidLicenseStatusError(LicenseException):
    """Raised when a license operation is invalid for the current status."""

    def __init__(self, message: str = "Invalid license status"):
        super().__init__(message, code="INVALID_LICENSE_STATUS")


class TeamException(DomainException):
    """Base exception for team-related errors."""

    pass


class TeamNotFoundError(TeamException):
    """Raised when a team is not found."""

    def __init__(self, message: str = "Team not found"):
        super().__init__(message, code="TEAM_NOT_FOUND")
