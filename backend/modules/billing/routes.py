"""
Billing API endpoints.

Credit checkout, Stripe webhook receiver, payment verification for the
success page, and the read-only auto-reload projection.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Header, Query, Request

from api.middleware.auth import get_token_context
from api.dependencies import get_billing_service
from modules.auth.models import TokenContext

from .interfaces import IBillingService
from .models import (
    AutoReloadSettings,
    CheckoutRequest,
    CheckoutResponse,
    ReloadVerification,
    WebhookAck,
)

router = APIRouter()


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    request: CheckoutRequest,
    context: TokenContext = Depends(get_token_context),
    service: IBillingService = Depends(get_billing_service),
) -> CheckoutResponse:
    """
    Start a credit purchase.

    Returns the Stripe-hosted checkout URL to redirect the browser to.
    """
    return await service.create_checkout_session(request, context)


@router.get("/verify", response_model=ReloadVerification)
async def verify_reload(
    session_id: Optional[str] = Query(default=None, description="Checkout session ID"),
    service: IBillingService = Depends(get_billing_service),
) -> ReloadVerification:
    """
    Report whether a checkout session was paid.

    Used by the success page for feedback only. Credits are added by the
    webhook, so the balance may lag behind a successful verification.
    """
    return await service.verify_reload(session_id)


@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None),
    service: IBillingService = Depends(get_billing_service),
) -> WebhookAck:
    """
    Receive a Stripe event.

    The raw body is needed for signature verification.
    """
    payload = await request.body()
    return await service.handle_webhook(payload, stripe_signature)


@router.get("/auto-reload", response_model=AutoReloadSettings)
async def get_auto_reload_settings(
    context: TokenContext = Depends(get_token_context),
    service: IBillingService = Depends(get_billing_service),
) -> AutoReloadSettings:
    """Get the caller's auto-reload settings as reported by the backend."""
    return await service.get_auto_reload_settings(context)
