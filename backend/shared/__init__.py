"""
Shared infrastructure for the Zamar web API.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- http_client: Async client for the backend and agent services
- exceptions: Base exception classes
- messages: Localized user-facing texts

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .http_client import ServiceClient
from .exceptions import (
    ZamarError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ServiceUnavailableError,
    ExternalServiceError,
    UpstreamError,
)
from .messages import get_message
from .models import AuthenticatedUser, CreditsSnapshot, SubscriptionInfo

__all__ = [
    "Settings",
    "get_settings",
    "ServiceClient",
    "ZamarError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ServiceUnavailableError",
    "ExternalServiceError",
    "UpstreamError",
    "get_message",
    "AuthenticatedUser",
    "CreditsSnapshot",
    "SubscriptionInfo",
]
