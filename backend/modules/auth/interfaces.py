"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and swapping the identity provider.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def get_current_user(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Resolve a bearer token to the user it belongs to.

        Args:
            token: Bearer token issued by the Zamar backend

        Returns:
            AuthenticatedUser reported by the identity endpoint

        Raises:
            MissingTokenError: If no token was given
            InvalidTokenError: If the identity endpoint rejected the token
            ExternalServiceError: If the identity endpoint was unreachable
        """
        ...

    def is_admin(self, user: AuthenticatedUser) -> bool:
        """
        Decide whether a user holds the admin capability.

        Args:
            user: User resolved from the identity endpoint

        Returns:
            True if the user may use the admin console
        """
        ...

    async def verify_admin(self, token: Optional[str]) -> bool:
        """
        Check that a bearer token belongs to an administrator.

        Fails closed: any error resolving the token yields False.
        Nothing is cached; every call re-checks with the identity endpoint.
        """
        ...
