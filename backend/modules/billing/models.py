"""
Billing module data models.

These models define the data structures used by the billing module
and exposed to other modules through the interface.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class WebhookEventType(str, Enum):
    """Stripe event types the webhook receiver acts on."""

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_INTENT_FAILED = "payment_intent.payment_failed"
    PAYMENT_METHOD_DETACHED = "payment_method.detached"
    SETUP_INTENT_SUCCEEDED = "setup_intent.succeeded"


class ReloadType(str, Enum):
    """Payment intent ``metadata.type`` values set by the backend."""

    AUTO_RELOAD = "auto_reload"
    MANUAL_RELOAD = "manual_reload"


class PaymentStatus(str, Enum):
    """Checkout session payment statuses."""

    PAID = "paid"
    UNPAID = "unpaid"
    NO_PAYMENT_REQUIRED = "no_payment_required"


class CheckoutRequest(BaseModel):
    """Request to start a credit purchase."""

    price_id: str = Field(..., description="Stripe price ID of the credit pack")
    credits_amount: int = Field(..., gt=0, description="Credits granted on payment")


class CheckoutResponse(BaseModel):
    """
    Checkout session created for a credit purchase.

    The client redirects the browser to ``url``.
    """

    url: str = Field(..., description="Checkout URL to redirect user to")
    session_id: str = Field(..., description="Stripe checkout session ID")


class CheckoutSession(BaseModel):
    """
    Processor-side record of an attempted payment.

    Moves from ``open`` to ``complete`` or ``expired`` and is immutable
    once terminal.
    """

    id: str = Field(..., description="Stripe checkout session ID")
    url: Optional[str] = Field(None, description="Hosted checkout URL")
    status: Optional[str] = Field(None, description="open, complete or expired")
    payment_status: Optional[str] = Field(None, description="Payment status")
    payment_intent: Optional[str] = Field(None, description="Payment intent ID")
    metadata: dict[str, str] = Field(default_factory=dict, description="Session metadata")

    model_config = {"extra": "ignore"}


class ReloadVerification(BaseModel):
    """Result of checking a checkout session from the success page."""

    success: bool = Field(..., description="Whether the payment completed")
    credits_amount: Optional[int] = Field(None, description="Credits purchased")
    payment_status: str = Field(..., description="Stripe payment status")


class WebhookEventData(BaseModel):
    """The ``data`` envelope of a Stripe event."""

    object: dict[str, Any] = Field(default_factory=dict, description="Event subject")


class WebhookEvent(BaseModel):
    """A verified Stripe event."""

    id: str = Field(..., description="Stripe event ID")
    type: str = Field(..., description="Event type")
    data: WebhookEventData = Field(default_factory=WebhookEventData)

    model_config = {"extra": "ignore"}


class WebhookAck(BaseModel):
    """Acknowledgement returned to Stripe."""

    received: bool = True


class AddCreditsRequest(BaseModel):
    """Body of the backend's credit-add endpoint."""

    user_id: str = Field(..., description="User to credit")
    credits_amount: int = Field(..., description="Credits to add")
    stripe_session_id: str = Field(..., description="Checkout session that paid")
    stripe_payment_intent_id: Optional[str] = Field(None, description="Payment intent ID")


class AutoReloadSettings(BaseModel):
    """
    Read-only projection of a user's auto-reload configuration.

    Owned and enforced by the backend; this layer only reports it.
    """

    enabled: bool = Field(default=False, description="Whether auto-reload is on")
    threshold: int = Field(default=0, description="Balance that triggers a reload")
    reload_amount: int = Field(default=0, description="Credits bought per reload")
    has_payment_method: bool = Field(default=False, description="Card on file")
    last_reload_at: Optional[str] = Field(None, description="Last successful reload")
    failed_attempts: int = Field(default=0, description="Consecutive failed reloads")
    paused_until: Optional[str] = Field(None, description="Reloads paused until")

    model_config = {"extra": "ignore"}
