"""
Billing service implementation.

Runs the credit-reload workflow: Stripe checkout creation, webhook
verification and dispatch, and session status checks. Credit balances are
owned by the Zamar backend; this service only asks it to add credits.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

import stripe
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from shared.config import Settings, get_settings
from shared.exceptions import AuthenticationError, ExternalServiceError
from shared.http_client import ServiceClient
from modules.auth.interfaces import IAuthService
from modules.auth.models import TokenContext
from modules.auth.service import AuthService, create_backend_client

from .interfaces import IBillingService
from .gateway import StripeGateway
from .models import (
    AddCreditsRequest,
    AutoReloadSettings,
    CheckoutRequest,
    CheckoutResponse,
    PaymentStatus,
    ReloadType,
    ReloadVerification,
    WebhookAck,
    WebhookEvent,
    WebhookEventType,
)
from .exceptions import (
    CheckoutFailedError,
    CheckoutUnauthorizedError,
    MissingSessionIdError,
    MissingSignatureError,
    PaymentNotCompletedError,
    PaymentsNotConfiguredError,
    PaymentVerificationError,
)

logger = logging.getLogger(__name__)

ADD_CREDITS_PATH = "/api/stripe/add-credits"
AUTO_RELOAD_PATH = "/api/stripe/auto-reload"
WEBHOOK_SECRET_HEADER = "x-webhook-secret"

RELOAD_TYPES = {ReloadType.AUTO_RELOAD.value, ReloadType.MANUAL_RELOAD.value}


def parse_credits_amount(value: Any) -> Optional[int]:
    """
    Parse ``metadata.credits_amount`` into an integer.

    Stripe metadata values are strings; returns None when the value is
    absent or not an integer.
    """
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _mapping(value: Any) -> dict[str, Any]:
    """Return ``value`` if it is a JSON object, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def _object_id(value: Any) -> Optional[str]:
    """Return the id of a Stripe reference that may be expanded."""
    if isinstance(value, dict):
        return value.get("id")
    return value


def create_stripe_gateway(settings: Settings) -> StripeGateway:
    """Build a Stripe gateway from settings."""
    return StripeGateway(
        secret_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
        tolerance=settings.stripe_webhook_tolerance,
    )


class BillingService(IBillingService):
    """
    Implementation of the credit-reload workflow.

    Stateless across calls: nothing is recorded about processed events.
    Idempotency of credit grants is the backend's responsibility (it
    receives the Stripe session id with every grant).
    """

    def __init__(
        self,
        gateway: Optional[StripeGateway] = None,
        backend: Optional[ServiceClient] = None,
        auth: Optional[IAuthService] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._gateway = gateway or create_stripe_gateway(self._settings)
        self._backend = backend or create_backend_client(self._settings)
        self._auth = auth or AuthService(backend=self._backend, settings=self._settings)

        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[None]]] = {
            WebhookEventType.CHECKOUT_SESSION_COMPLETED.value: self._on_checkout_completed,
            WebhookEventType.PAYMENT_INTENT_SUCCEEDED.value: self._on_payment_succeeded,
            WebhookEventType.PAYMENT_INTENT_FAILED.value: self._on_payment_failed,
            WebhookEventType.SETUP_INTENT_SUCCEEDED.value: self._on_setup_succeeded,
            WebhookEventType.PAYMENT_METHOD_DETACHED.value: self._on_payment_method_detached,
        }

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    async def create_checkout_session(
        self,
        request: CheckoutRequest,
        context: TokenContext,
    ) -> CheckoutResponse:
        """Create a one-off payment session for a credit pack."""
        try:
            user = await self._auth.get_current_user(context.effective_token)
        except AuthenticationError as e:
            raise CheckoutUnauthorizedError() from e
        except ExternalServiceError as e:
            raise CheckoutFailedError() from e

        if not self._gateway.is_configured:
            raise PaymentsNotConfiguredError()

        web_url = self._settings.web_url.rstrip("/")
        params = {
            "customer_email": user.email,
            "payment_method_types": ["card"],
            "line_items": [{"price": request.price_id, "quantity": 1}],
            "mode": "payment",
            # Stripe substitutes the literal {CHECKOUT_SESSION_ID} placeholder
            "success_url": f"{web_url}/credits/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{web_url}/credits",
            "metadata": {
                "user_id": user.id,
                "credits_amount": str(request.credits_amount),
            },
        }

        try:
            session = await run_in_threadpool(self._gateway.create_checkout_session, **params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout error for user {user.id}: {e}")
            raise CheckoutFailedError(str(e)) from e

        if not session.url:
            logger.error(f"Stripe checkout session {session.id} has no redirect URL")
            raise CheckoutFailedError()

        logger.info(
            f"Checkout session {session.id} created for user {user.id} "
            f"({request.credits_amount} credits)"
        )
        return CheckoutResponse(url=session.url, session_id=session.id)

    # ------------------------------------------------------------------
    # Reload verification
    # ------------------------------------------------------------------

    async def verify_reload(self, session_id: Optional[str]) -> ReloadVerification:
        """Check a checkout session's payment status."""
        if not session_id:
            raise MissingSessionIdError()

        try:
            session = await run_in_threadpool(
                self._gateway.retrieve_checkout_session, session_id
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe verify error for session {session_id}: {e}")
            raise PaymentVerificationError(session_id) from e

        if session.payment_status != PaymentStatus.PAID.value:
            raise PaymentNotCompletedError(session_id, session.payment_status)

        return ReloadVerification(
            success=True,
            credits_amount=parse_credits_amount(session.metadata.get("credits_amount")),
            payment_status=session.payment_status,
        )

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    async def handle_webhook(
        self,
        payload: bytes,
        signature: Optional[str],
    ) -> WebhookAck:
        """Verify a Stripe delivery and dispatch it by event type."""
        if not signature:
            raise MissingSignatureError()

        event = self._gateway.construct_event(payload, signature)
        logger.info(f"Received Stripe event {event.id} ({event.type})")

        await self._dispatch(event)
        return WebhookAck(received=True)

    async def _dispatch(self, event: WebhookEvent) -> None:
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.info(f"Unhandled event type: {event.type}")
            return
        await handler(event.data.object)

    async def _on_checkout_completed(self, session: dict[str, Any]) -> None:
        session_id = session.get("id")
        metadata = _mapping(session.get("metadata"))

        user_id = metadata.get("user_id")
        credits_amount = parse_credits_amount(metadata.get("credits_amount"))

        # Malformed sessions are acknowledged so Stripe does not redeliver them
        if not session_id or not user_id or credits_amount is None:
            logger.error(f"Missing metadata in checkout session: {session_id}")
            return

        try:
            grant = AddCreditsRequest(
                user_id=user_id,
                credits_amount=credits_amount,
                stripe_session_id=session_id,
                stripe_payment_intent_id=_object_id(session.get("payment_intent")),
            )
        except PydanticValidationError as e:
            logger.error(f"Malformed checkout session {session_id}: {e}")
            return

        await self._grant_credits(grant)

    async def _grant_credits(self, grant: AddCreditsRequest) -> None:
        """
        Ask the backend to add credits.

        Failures are logged and dropped: there is no retry and no
        dead-letter store in this layer.
        """
        try:
            response = await self._backend.request(
                "POST",
                ADD_CREDITS_PATH,
                json=grant.model_dump(),
                headers={WEBHOOK_SECRET_HEADER: self._settings.credit_webhook_secret},
            )
        except ExternalServiceError:
            logger.error(
                f"Failed to add credits: backend unreachable "
                f"(session {grant.stripe_session_id}, user {grant.user_id}, "
                f"{grant.credits_amount} credits)"
            )
            return

        if not response.is_success:
            logger.error(
                f"Failed to add credits (session {grant.stripe_session_id}, "
                f"status {response.status_code}): {response.text}"
            )
            return

        logger.info(f"Added {grant.credits_amount} credits to user {grant.user_id}")

    async def _on_payment_succeeded(self, payment_intent: dict[str, Any]) -> None:
        metadata = _mapping(payment_intent.get("metadata"))
        # Reload transactions are created by the backend; logging only
        if metadata.get("type") in RELOAD_TYPES:
            logger.info(
                f"Reload payment succeeded: {payment_intent.get('id')} "
                f"for user {metadata.get('user_id')}"
            )

    async def _on_payment_failed(self, payment_intent: dict[str, Any]) -> None:
        metadata = _mapping(payment_intent.get("metadata"))
        last_error = _mapping(payment_intent.get("last_payment_error")).get("message")

        logger.error(f"Payment failed: {payment_intent.get('id')} {last_error or ''}".rstrip())
        # Auto-reload retry and pause state is owned by the backend
        if metadata.get("type") == ReloadType.AUTO_RELOAD.value:
            logger.error(
                f"Auto-reload failed for user {metadata.get('user_id')}: {last_error}"
            )

    async def _on_setup_succeeded(self, setup_intent: dict[str, Any]) -> None:
        # Saved cards are finalized by the client's confirm-setup call
        logger.info(
            f"SetupIntent succeeded: {setup_intent.get('id')} "
            f"for customer {setup_intent.get('customer')}"
        )

    async def _on_payment_method_detached(self, payment_method: dict[str, Any]) -> None:
        logger.info(
            f"Payment method detached: {payment_method.get('id')} "
            f"from customer {payment_method.get('customer')}"
        )

    # ------------------------------------------------------------------
    # Auto-reload
    # ------------------------------------------------------------------

    async def get_auto_reload_settings(self, context: TokenContext) -> AutoReloadSettings:
        """Fetch the read-only auto-reload projection from the backend."""
        body = await self._backend.forward(
            "GET",
            AUTO_RELOAD_PATH,
            token=context.effective_token,
        )
        try:
            return AutoReloadSettings.model_validate(body)
        except PydanticValidationError as e:
            logger.error(f"Backend returned invalid auto-reload settings: {e}")
            raise ExternalServiceError(
                "Invalid response from backend",
                service=self._backend.service,
                details={"path": AUTO_RELOAD_PATH},
            ) from e
