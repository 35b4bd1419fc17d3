"""
Billing module interface.

Routes depend on IBillingService, not the concrete implementation.
The credit-reload workflow has two independent collaborators: the webhook
consumer that grants credits, and the read-only session status query used
by the success page.
"""

from typing import Optional, Protocol, runtime_checkable

from modules.auth.models import TokenContext

from .models import (
    AutoReloadSettings,
    CheckoutRequest,
    CheckoutResponse,
    ReloadVerification,
    WebhookAck,
)


@runtime_checkable
class IBillingService(Protocol):
    """
    Interface for the credit-reload workflow.

    This protocol defines the contract that the billing module exposes
    to the API layer.
    """

    async def create_checkout_session(
        self,
        request: CheckoutRequest,
        context: TokenContext,
    ) -> CheckoutResponse:
        """
        Start a credit purchase for the calling user.

        Args:
            request: Price and credit amount of the pack
            context: Credentials of the calling request

        Returns:
            CheckoutResponse with the hosted checkout URL

        Raises:
            CheckoutUnauthorizedError: If the caller is not logged in
            CheckoutFailedError: If the session could not be created
        """
        ...

    async def verify_reload(self, session_id: Optional[str]) -> ReloadVerification:
        """
        Report whether a checkout session has been paid.

        Read-only: credits are granted by the webhook, which may land
        before or after this call.

        Raises:
            MissingSessionIdError: If no session id was given
            PaymentNotCompletedError: If the session is not paid
            PaymentVerificationError: If the session could not be retrieved
        """
        ...

    async def handle_webhook(
        self,
        payload: bytes,
        signature: Optional[str],
    ) -> WebhookAck:
        """
        Verify and process a Stripe webhook delivery.

        Args:
            payload: Raw request body
            signature: Value of the ``stripe-signature`` header

        Returns:
            WebhookAck once the event has been dispatched

        Raises:
            MissingSignatureError: If no signature header was sent
            WebhookVerificationError: If the signature is invalid
            WebhookPayloadError: If the body is not a Stripe event
        """
        ...

    async def get_auto_reload_settings(self, context: TokenContext) -> AutoReloadSettings:
        """
        Fetch the caller's auto-reload settings from the backend.

        Raises:
            UpstreamError: If the backend answered with a non-2xx status
        """
        ...
