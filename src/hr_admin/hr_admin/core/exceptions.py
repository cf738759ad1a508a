class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class LocationOutOfRangeError(ValidationError):
    """Raised when an in-office employee is too far from the office."""

    def __init__(self, *, distance_m: int, allowed_radius_m: float):
        self.distance_m = int(distance_m)
        self.allowed_radius_m = allowed_radius_m
        super().__init__(
            f"You must be within {allowed_radius_m:g}m of the office to mark attendance. "
            f"You are {self.distance_m}m away."
        )


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
