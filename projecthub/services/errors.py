"""
Classified service failures.

Services raise these; the gateway renders them as ``{"error": message}``
with the matching status code. Anything that is not a ``ServiceError``
is logged and reported as a generic 500.
"""

from fastapi import status


class ServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ServiceError):
    """A required field is missing or a value is outside its allowed set."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Conflict(ServiceError):
    """A unique field (username, email) is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class Unauthenticated(ServiceError):
    """No bearer token was presented."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access token required"


class Unauthorized(ServiceError):
    """Login failed. Unknown email and wrong password look the same."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Forbidden(ServiceError):
    """A bearer token was presented but is invalid, expired or mis-signed."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid token"


class NotFound(ServiceError):
    """Missing resource, or one the caller is not allowed to touch."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Project not found"


class RateLimited(ServiceError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests from this IP, please try again later."

    def __init__(self, retry_after: int, message: str | None = None):
        self.retry_after = retry_after
        super().__init__(message)


class ServiceUnavailable(ServiceError):
    """The data store did not answer within the configured timeout."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service temporarily unavailable"
