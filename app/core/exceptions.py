"""Domain errors raised by the services and rendered by the handlers in app.main."""
from fastapi import status


class PortalError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortalError):
    """Missing or invalid input fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(self, message: str = None, fields: list = None):
        self.fields = fields or []
        super().__init__(message)


class AuthenticationError(PortalError):
    """Missing, invalid or expired credential. The cause is never exposed."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"


class AuthorizationError(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UpstreamError(PortalError):
    """A third-party API call failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Upstream service error"
