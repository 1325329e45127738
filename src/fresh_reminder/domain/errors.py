"""Domain errors and the HTTP status each one maps to."""

from fastapi import status


class FreshReminderError(Exception):
    """Base class for failures surfaced to API clients.

    Attributes:
        message: fixed human-readable message returned to the client
        http_status: status code the API layer responds with
    """

    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        return {"message": self.message}


class AccessError(FreshReminderError):
    """Raised when a request fails an access check."""


class Unauthorized(AccessError):
    """Missing, malformed, invalid or expired bearer credential."""

    http_status = status.HTTP_401_UNAUTHORIZED
    default_message = "unauthorized access"


class Forbidden(AccessError):
    """Verified caller does not own the requested data."""

    http_status = status.HTTP_403_FORBIDDEN
    default_message = "forbidden access"


class IdentityProviderUnavailable(AccessError):
    """Identity provider could not be reached."""

    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "identity provider unavailable"


class FoodNotFound(FreshReminderError):
    """No food record exists for the identifier."""

    http_status = status.HTTP_404_NOT_FOUND
    default_message = "food not found"


class StoreFailure(FreshReminderError):
    """The document store rejected or failed an operation."""

    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "store failure"


class StoreUnavailable(StoreFailure):
    """The document store stayed unreachable after retries."""

    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "store unavailable"
