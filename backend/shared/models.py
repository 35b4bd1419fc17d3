"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


class CreditsSnapshot(BaseModel):
    """
    A user's credit balance as last reported by the backend.

    This is a snapshot, never a source of truth: credits are only mutated
    by the backend and may be stale until the next fetch.
    """

    count: int = Field(default=0, description="Balance in minor currency units")
    last_updated: Optional[str] = Field(None, description="Last balance change")

    model_config = {"frozen": True, "extra": "ignore"}


class SubscriptionInfo(BaseModel):
    """A user's subscription as reported by the backend."""

    active: bool = Field(default=False, description="Whether the subscription is active")
    tier: str = Field(default="free", description="Subscription tier")
    expires_at: Optional[str] = Field(None, description="Expiry timestamp")

    model_config = {"frozen": True, "extra": "ignore"}


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    Populated from the backend identity endpoint (``/api/auth/me``) and
    made available to route handlers via dependency injection.
    """

    id: str = Field(
        ...,
        validation_alias=AliasChoices("_id", "id"),
        description="Backend user ID",
    )
    email: str = Field(..., description="User's email address")
    username: Optional[str] = Field(None, description="Display username")
    role: Optional[str] = Field(None, description="Role claim from the identity provider")
    credits: Optional[CreditsSnapshot] = Field(None, description="Credit balance snapshot")
    subscription: Optional[SubscriptionInfo] = Field(None, description="Subscription info")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from the backend
        "populate_by_name": True,
    }
