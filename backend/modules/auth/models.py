"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from typing import Optional
from pydantic import BaseModel, Field


class TokenContext(BaseModel):
    """
    Credentials carried by a single inbound request.

    Impersonation is an explicit capability attached to the request rather
    than ambient state, so it can never leak into another request. Admin
    checks always use ``bearer_token``; user-scoped calls use
    ``effective_token``.
    """

    bearer_token: str = Field(..., description="Caller's own bearer token")
    impersonation_token: Optional[str] = Field(
        None,
        description="Token issued by the impersonate endpoint, if any",
    )

    model_config = {"frozen": True}

    @property
    def effective_token(self) -> str:
        """Token to act with for user-scoped calls."""
        return self.impersonation_token or self.bearer_token

    @property
    def is_impersonating(self) -> bool:
        return self.impersonation_token is not None


class IdentityResponse(BaseModel):
    """Body of the backend's ``/api/auth/me`` endpoint."""

    user: Optional[dict] = Field(None, description="Raw user document")
