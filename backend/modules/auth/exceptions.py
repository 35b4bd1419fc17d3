"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import AuthenticationError, AuthorizationError
from shared.messages import get_message


class InvalidTokenError(AuthenticationError):
    """Raised when the backend rejects a bearer token."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or get_message("not_logged_in"), code="INVALID_TOKEN")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or get_message("not_logged_in"), code="MISSING_TOKEN")


class AdminAccessRequiredError(AuthorizationError):
    """Raised when an authenticated caller is not an administrator."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or get_message("forbidden"), code="ADMIN_ONLY")
