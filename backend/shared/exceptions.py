"""
Base exception classes for the Zamar web API.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class ZamarError(Exception):
    """
    Base exception for all Zamar errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the API's error body; empty details are omitted."""
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(ZamarError):
    """Resource not found."""

    pass


class ValidationError(ZamarError):
    """Input validation failed."""

    pass


class AuthenticationError(ZamarError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(ZamarError):
    """Authorization failed (insufficient permissions)."""

    pass


class ServiceUnavailableError(ZamarError):
    """A required integration is not configured."""

    pass


class ExternalServiceError(ZamarError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class UpstreamError(ExternalServiceError):
    """
    An external service answered with a non-2xx status.

    Carries the upstream status code and JSON body so API handlers can
    relay them to the caller unchanged.
    """

    def __init__(self, service: str, status_code: int, body: Any):
        super().__init__(
            f"{service} responded with status {status_code}",
            service=service,
            code="UPSTREAM_ERROR",
            details={"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body
