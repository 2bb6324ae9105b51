"""Error taxonomy shared by services and the API layer"""
from fastapi import status


class FinanceError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(FinanceError):
    """No current user id is available."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User is not authenticated"


class NotFound(FinanceError):
    """A referenced merchant, category or transaction does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationFailure(FinanceError):
    """Caller-supplied input fails a precondition."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class PersistenceFailure(FinanceError):
    """The document store failed to read or write."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage unavailable"


def require_user(user_id: str | None) -> str:
    """Return ``user_id`` or raise ``NotAuthenticated`` when it is missing."""
    if not user_id:
        raise NotAuthenticated()
    return user_id
