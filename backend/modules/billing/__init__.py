"""
Billing module.

Handles the Stripe credit-reload workflow: checkout creation, webhook
processing and payment verification. Balances live in the backend.

Public API:
- IBillingService: Interface for billing operations
- CheckoutRequest / CheckoutResponse: Credit purchase
- ReloadVerification: Success-page payment check
- AutoReloadSettings: Read-only auto-reload projection
- Billing exceptions: WebhookVerificationError, PaymentNotCompletedError, etc.
"""

from .interfaces import IBillingService
from .models import (
    AddCreditsRequest,
    AutoReloadSettings,
    CheckoutRequest,
    CheckoutResponse,
    CheckoutSession,
    PaymentStatus,
    ReloadType,
    ReloadVerification,
    WebhookAck,
    WebhookEvent,
    WebhookEventType,
)
from .exceptions import (
    BillingError,
    CheckoutFailedError,
    CheckoutUnauthorizedError,
    MissingSessionIdError,
    MissingSignatureError,
    PaymentNotCompletedError,
    PaymentsNotConfiguredError,
    PaymentVerificationError,
    WebhookPayloadError,
    WebhookVerificationError,
)

__all__ = [
    # Interface
    "IBillingService",
    # Models
    "AddCreditsRequest",
    "AutoReloadSettings",
    "CheckoutRequest",
    "CheckoutResponse",
    "CheckoutSession",
    "PaymentStatus",
    "ReloadType",
    "ReloadVerification",
    "WebhookAck",
    "WebhookEvent",
    "WebhookEventType",
    # Exceptions
    "BillingError",
    "CheckoutFailedError",
    "CheckoutUnauthorizedError",
    "MissingSessionIdError",
    "MissingSignatureError",
    "PaymentNotCompletedError",
    "PaymentsNotConfiguredError",
    "PaymentVerificationError",
    "WebhookPayloadError",
    "WebhookVerificationError",
]
