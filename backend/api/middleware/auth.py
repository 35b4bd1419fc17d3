"""
Authentication dependencies.

Extracts the bearer and impersonation credentials of each request and
gates admin routes on the backend-verified admin capability.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from shared.config import get_settings
from modules.auth.interfaces import IAuthService
from modules.auth.models import TokenContext
from modules.auth.exceptions import AdminAccessRequiredError, MissingTokenError

from ..dependencies import get_auth_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenContext:
    """
    Dependency that requires an ``Authorization: Bearer`` header.

    The optional impersonation header is attached to the same context,
    never stored anywhere else.
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    impersonation_token = request.headers.get(get_settings().impersonation_header)
    return TokenContext(
        bearer_token=credentials.credentials,
        impersonation_token=impersonation_token or None,
    )


async def require_admin(
    context: TokenContext = Depends(get_token_context),
    auth: IAuthService = Depends(get_auth_service),
) -> TokenContext:
    """
    Dependency for admin-only routes.

    Verifies the caller's own bearer token on every request; an
    impersonation token is never used for this check.
    """
    if not await auth.verify_admin(context.bearer_token):
        raise AdminAccessRequiredError()
    return context
