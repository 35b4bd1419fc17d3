"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    ServiceUnavailableError,
    ValidationError,
    ZamarError,
)
from shared.messages import get_message


class BillingError(ZamarError):
    """Base exception for billing-related errors."""

    pass


class PaymentsNotConfiguredError(ServiceUnavailableError):
    """Raised when Stripe credentials are missing."""

    def __init__(self):
        super().__init__(
            get_message("payments_unavailable"),
            code="PAYMENTS_NOT_CONFIGURED",
        )


class CheckoutUnauthorizedError(AuthenticationError):
    """Raised when a checkout is requested without a valid login."""

    def __init__(self):
        super().__init__(get_message("not_logged_in"), code="NOT_LOGGED_IN")


class CheckoutFailedError(BillingError):
    """Raised when a checkout session could not be created."""

    def __init__(self, stripe_error: Optional[str] = None):
        super().__init__(
            get_message("checkout_failed"),
            code="CHECKOUT_FAILED",
            details={"stripe_error": stripe_error} if stripe_error else {},
        )


class MissingSessionIdError(ValidationError):
    """Raised when the verify endpoint is called without a session id."""

    def __init__(self):
        super().__init__("Missing session_id", code="MISSING_SESSION_ID")


class PaymentNotCompletedError(ValidationError):
    """Raised when a checkout session has not been paid."""

    def __init__(self, session_id: str, payment_status: Optional[str]):
        super().__init__(
            "Payment not completed",
            code="PAYMENT_NOT_COMPLETED",
            details={"session_id": session_id, "payment_status": payment_status},
        )


class PaymentVerificationError(BillingError):
    """Raised when a checkout session could not be retrieved."""

    def __init__(self, session_id: str):
        super().__init__(
            "Failed to verify payment",
            code="PAYMENT_VERIFICATION_FAILED",
            details={"session_id": session_id},
        )


class MissingSignatureError(ValidationError):
    """Raised when a webhook arrives without a ``stripe-signature`` header."""

    def __init__(self):
        super().__init__(
            "Missing stripe-signature header",
            code="MISSING_SIGNATURE",
        )


class WebhookVerificationError(ValidationError):
    """Raised when Stripe webhook signature verification fails."""

    def __init__(self):
        super().__init__(
            "Invalid signature",
            code="WEBHOOK_VERIFICATION_FAILED",
        )


class WebhookPayloadError(ValidationError):
    """Raised when a correctly signed webhook body is not a Stripe event."""

    def __init__(self):
        super().__init__("Invalid payload", code="INVALID_WEBHOOK_PAYLOAD")
