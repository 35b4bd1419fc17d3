"""
Stripe gateway.

Thin wrapper around the Stripe SDK so the billing service can be tested
with a fake processor. SDK calls are blocking; callers run them in a
threadpool.
"""

import logging
from typing import Any, Optional

import stripe
from pydantic import ValidationError as PydanticValidationError

from .models import CheckoutSession, WebhookEvent
from .exceptions import (
    PaymentsNotConfiguredError,
    WebhookPayloadError,
    WebhookVerificationError,
)

logger = logging.getLogger(__name__)


def _is_valid_secret_key(secret_key: Optional[str]) -> bool:
    if not secret_key:
        return False
    key = secret_key.strip()
    return key.startswith(("sk_", "rk_")) and len(key) >= 16


def _to_dict(obj: Any) -> dict:
    """Convert a StripeObject (or plain mapping) to a dict."""
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return dict(obj)


class StripeGateway:
    """
    Stripe operations used by the credit-reload workflow.

    The API key is passed per call instead of being set on the global
    ``stripe`` module.
    """

    def __init__(
        self,
        secret_key: str,
        webhook_secret: str,
        tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
    ):
        self._secret_key = secret_key.strip()
        self._webhook_secret = webhook_secret
        self._tolerance = tolerance

    @property
    def is_configured(self) -> bool:
        """Whether a usable secret key is present."""
        return _is_valid_secret_key(self._secret_key)

    def _require_configured(self) -> None:
        if not self.is_configured:
            logger.warning("Stripe not configured: STRIPE_SECRET_KEY is missing or invalid")
            raise PaymentsNotConfiguredError()

    def create_checkout_session(self, **params: Any) -> CheckoutSession:
        """
        Create a Checkout Session.

        Raises:
            PaymentsNotConfiguredError: If no secret key is configured
            stripe.StripeError: If Stripe rejects the request
        """
        self._require_configured()
        session = stripe.checkout.Session.create(api_key=self._secret_key, **params)
        logger.info(f"Created Stripe checkout session {session.id}")
        return CheckoutSession.model_validate(_to_dict(session))

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """
        Fetch a Checkout Session by id.

        Raises:
            PaymentsNotConfiguredError: If no secret key is configured
            stripe.StripeError: If the session cannot be retrieved
        """
        self._require_configured()
        session = stripe.checkout.Session.retrieve(session_id, api_key=self._secret_key)
        return CheckoutSession.model_validate(_to_dict(session))

    def construct_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """
        Verify a webhook signature and parse the event.

        Raises:
            PaymentsNotConfiguredError: If no webhook secret is configured
            WebhookVerificationError: If the signature does not match
            WebhookPayloadError: If the body is not a Stripe event
        """
        if not self._webhook_secret:
            logger.error("Stripe webhook received but STRIPE_WEBHOOK_SECRET is not set")
            raise PaymentsNotConfiguredError()

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"Invalid webhook payload encoding: {e}")
            raise WebhookPayloadError() from e

        try:
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                self._webhook_secret,
                tolerance=self._tolerance,
            )
        except stripe.SignatureVerificationError as e:
            logger.error(f"Webhook signature verification failed: {e}")
            raise WebhookVerificationError() from e

        # Only an object with id and type is an event; lists and scalars are not
        try:
            return WebhookEvent.model_validate_json(body)
        except PydanticValidationError as e:
            logger.error(f"Webhook payload is not a Stripe event: {e}")
            raise WebhookPayloadError() from e
