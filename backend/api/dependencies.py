"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Tests replace services with ``app.dependency_overrides`` on the
functions at the bottom of this file.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.admin.interfaces import IAdminService
    from modules.auth.interfaces import IAuthService
    from modules.billing.interfaces import IBillingService
    from modules.lyrics.interfaces import ILyricsService


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons.
    They hold configuration and clients only, never per-request state.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._auth_service: "IAuthService | None" = None
        self._billing_service: "IBillingService | None" = None
        self._admin_service: "IAdminService | None" = None
        self._lyrics_service: "ILyricsService | None" = None

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService()
        return self._auth_service

    @property
    def billing(self) -> "IBillingService":
        """Get the billing service instance."""
        if self._billing_service is None:
            from modules.billing.service import BillingService
            self._billing_service = BillingService(auth=self.auth)
        return self._billing_service

    @property
    def admin(self) -> "IAdminService":
        """Get the admin service instance."""
        if self._admin_service is None:
            from modules.admin.service import AdminService
            self._admin_service = AdminService()
        return self._admin_service

    @property
    def lyrics(self) -> "ILyricsService":
        """Get the lyrics agent service instance."""
        if self._lyrics_service is None:
            from modules.lyrics.service import LyricsService
            self._lyrics_service = LyricsService()
        return self._lyrics_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._auth_service = None
        self._billing_service = None
        self._admin_service = None
        self._lyrics_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container with new
    service instances. Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_billing_service() -> "IBillingService":
    """FastAPI dependency for billing service."""
    return get_container().billing


def get_admin_service() -> "IAdminService":
    """FastAPI dependency for admin service."""
    return get_container().admin


def get_lyrics_service() -> "ILyricsService":
    """FastAPI dependency for lyrics agent service."""
    return get_container().lyrics
