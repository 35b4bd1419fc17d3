"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    backend: str
    stripe: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports whether the backend URL and Stripe keys are configured. Remote
    services are not contacted.
    """
    settings = get_settings()
    backend = "configured" if settings.backend_api_url else "missing"
    stripe = (
        "configured"
        if settings.stripe_secret_key and settings.stripe_webhook_secret
        else "missing"
    )
    status = "ready" if backend == "configured" else "degraded"
    return ReadinessResponse(status=status, backend=backend, stripe=stripe)
