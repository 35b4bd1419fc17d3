"""
Authentication module.

Handles identity resolution against the backend, the admin capability
check, and per-request token contexts.

Public API:
- IAuthService: Interface for auth operations
- TokenContext: Bearer and impersonation credentials of one request
- Auth exceptions: InvalidTokenError, MissingTokenError, AdminAccessRequiredError
"""

from .interfaces import IAuthService
from .models import TokenContext, IdentityResponse
from .exceptions import (
    InvalidTokenError,
    MissingTokenError,
    AdminAccessRequiredError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "TokenContext",
    "IdentityResponse",
    # Exceptions
    "InvalidTokenError",
    "MissingTokenError",
    "AdminAccessRequiredError",
]
