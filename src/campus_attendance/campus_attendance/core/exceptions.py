from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def to_payload(self) -> dict:
        return {"error": str(self)}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the bearer credential is missing or cannot be verified."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class TokenFormatError(ValidationError):
    """Raised when a scanned code cannot be parsed into a session token."""


class TokenExpiredError(ValidationError):
    """Raised when a rotating code is older than the freshness window."""


class SessionNotFoundError(DomainError):
    status_code = 404


class SessionInactiveError(DomainError):
    status_code = 404


class LocationMissingError(ValidationError):
    """Raised when location validation is on but a point is absent."""


class GeofenceRejectedError(DomainError):
    """Raised when the device is outside the acceptable radius."""

    status_code = 403

    def __init__(self, distance: int, radius: float | None = None):
        self.distance = int(distance)
        self.radius = radius
        super().__init__(f"Too far from class ({self.distance} m away)")

    def to_payload(self) -> dict:
        return {"error": str(self), "distance": self.distance}


class CooldownActiveError(DomainError):
    status_code = 429

    def __init__(self, remaining_seconds: int):
        self.remaining_seconds = int(remaining_seconds)
        super().__init__(f"Wait {self.remaining_seconds} seconds before claiming another bonus")

    def to_payload(self) -> dict:
        return {"error": str(self), "remainingSeconds": self.remaining_seconds}


class DependencyError(DomainError):
    """Raised when the store or identity provider is unavailable.

    Safe for clients to retry verbatim: the attendance ledger is idempotent.
    """

    status_code = 500
