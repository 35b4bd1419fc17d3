"""
Authentication service implementation.

Identity is owned by the Zamar backend: tokens are resolved by calling its
``/api/auth/me`` endpoint, and the admin capability is derived from the
user it reports.
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings, get_settings
from shared.exceptions import ZamarError
from shared.http_client import ServiceClient
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import IdentityResponse
from .exceptions import InvalidTokenError, MissingTokenError

logger = logging.getLogger(__name__)

IDENTITY_PATH = "/api/auth/me"


def create_backend_client(settings: Settings) -> ServiceClient:
    """Build a client for the Zamar backend from settings."""
    return ServiceClient(
        "backend",
        settings.backend_api_url,
        timeout=settings.http_timeout,
    )


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Delegates token validation to the backend identity endpoint.
    """

    def __init__(
        self,
        backend: Optional[ServiceClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._backend = backend or create_backend_client(self._settings)

    async def get_current_user(self, token: Optional[str]) -> AuthenticatedUser:
        """Resolve a bearer token through the backend identity endpoint."""
        if not token:
            raise MissingTokenError()

        response = await self._backend.request("GET", IDENTITY_PATH, token=token)
        if not response.is_success:
            logger.info(f"Identity check rejected token (status {response.status_code})")
            raise InvalidTokenError()

        try:
            identity = IdentityResponse.model_validate(
                self._backend.decode(response, "GET", IDENTITY_PATH)
            )
            if identity.user is None:
                raise InvalidTokenError()
            return AuthenticatedUser.model_validate(identity.user)
        except PydanticValidationError as e:
            logger.warning(f"Identity endpoint returned an unusable user: {e}")
            raise InvalidTokenError()

    def is_admin(self, user: AuthenticatedUser) -> bool:
        """
        Admin capability predicate.

        True for a role claim listed in ``admin_roles`` or for an exact,
        case-sensitive match on the configured admin email.
        """
        if user.role and user.role in self._settings.admin_roles:
            return True
        admin_email = self._settings.admin_email
        return bool(admin_email) and user.email == admin_email

    async def verify_admin(self, token: Optional[str]) -> bool:
        """Fail-closed admin check for a bearer token."""
        try:
            user = await self.get_current_user(token)
        except ZamarError as e:
            logger.info(f"Admin check failed: {e.code}")
            return False
        allowed = self.is_admin(user)
        if not allowed:
            logger.warning(f"Non-admin user {user.id} attempted admin access")
        return allowed
