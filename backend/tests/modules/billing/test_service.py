"""Tests for billing service."""

import json
import logging
from unittest.mock import MagicMock

import httpx
import pytest
import stripe

from modules.auth.models import TokenContext
from modules.billing.exceptions import (
    CheckoutFailedError,
    CheckoutUnauthorizedError,
    MissingSessionIdError,
    MissingSignatureError,
    PaymentNotCompletedError,
    PaymentsNotConfiguredError,
    PaymentVerificationError,
    WebhookVerificationError,
)
from modules.billing.gateway import StripeGateway
from modules.billing.interfaces import IBillingService
from modules.billing.models import CheckoutRequest, CheckoutSession
from modules.billing.service import BillingService, parse_credits_amount
from shared.exceptions import ExternalServiceError, UpstreamError
from tests.conftest import (
    FakeBackend,
    IMPERSONATION_TOKEN,
    TEST_WEBHOOK_SECRET,
    USER_TOKEN,
    make_client,
    make_settings,
    sign_payload,
    stripe_event,
)


def make_gateway(**session_fields) -> MagicMock:
    gateway = MagicMock(spec=StripeGateway)
    gateway.is_configured = True
    fields = {
        "id": "cs_test_1",
        "url": "https://checkout.stripe.com/c/pay/cs_test_1",
        "status": "open",
        "payment_status": "unpaid",
    }
    fields.update(session_fields)
    gateway.create_checkout_session.return_value = CheckoutSession(**fields)
    gateway.retrieve_checkout_session.return_value = CheckoutSession(**fields)
    return gateway


def make_service(gateway=None, backend=None, **settings) -> BillingService:
    return BillingService(
        gateway=gateway or make_gateway(),
        backend=make_client(backend or FakeBackend()),
        settings=make_settings(**settings),
    )


def webhook_service(backend: FakeBackend, **settings) -> BillingService:
    resolved = make_settings(**settings)
    gateway = StripeGateway(
        resolved.stripe_secret_key,
        resolved.stripe_webhook_secret,
        tolerance=resolved.stripe_webhook_tolerance,
    )
    return BillingService(gateway=gateway, backend=make_client(backend), settings=resolved)


def completed_session(**metadata) -> dict:
    return {
        "id": "cs_test_1",
        "object": "checkout.session",
        "payment_intent": "pi_test_1",
        "metadata": metadata,
    }


class TestParseCreditsAmount:
    @pytest.mark.parametrize(
        "value, expected",
        [("500", 500), (" 25 ", 25), (10, 10), ("0", 0), (None, None), ("abc", None), ("1.5", None), ("", None)],
    )
    def test_parse(self, value, expected):
        assert parse_credits_amount(value) == expected


class TestCreateCheckoutSession:
    @pytest.mark.asyncio
    async def test_creates_session_for_caller(self):
        gateway = make_gateway()
        service = make_service(gateway=gateway)

        result = await service.create_checkout_session(
            CheckoutRequest(price_id="price_500", credits_amount=500),
            TokenContext(bearer_token=USER_TOKEN),
        )

        assert result.url == "https://checkout.stripe.com/c/pay/cs_test_1"
        assert result.session_id == "cs_test_1"

        params = gateway.create_checkout_session.call_args.kwargs
        assert params["customer_email"] == "singer@example.com"
        assert params["mode"] == "payment"
        assert params["payment_method_types"] == ["card"]
        assert params["line_items"] == [{"price": "price_500", "quantity": 1}]
        assert params["metadata"] == {"user_id": "user-1", "credits_amount": "500"}
        assert params["success_url"] == (
            "https://zamar.test/credits/success?session_id={CHECKOUT_SESSION_ID}"
        )
        assert params["cancel_url"] == "https://zamar.test/credits"

    @pytest.mark.asyncio
    async def test_impersonated_checkout_uses_impersonated_user(self):
        gateway = make_gateway()
        service = make_service(gateway=gateway)

        await service.create_checkout_session(
            CheckoutRequest(price_id="price_500", credits_amount=500),
            TokenContext(bearer_token=USER_TOKEN, impersonation_token=IMPERSONATION_TOKEN),
        )

        params = gateway.create_checkout_session.call_args.kwargs
        assert params["customer_email"] == "guest@example.com"
        assert params["metadata"]["user_id"] == "user-2"

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        gateway = make_gateway()
        with pytest.raises(CheckoutUnauthorizedError):
            await make_service(gateway=gateway).create_checkout_session(
                CheckoutRequest(price_id="price_500", credits_amount=500),
                TokenContext(bearer_token="expired"),
            )
        gateway.create_checkout_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_backend_unreachable(self):
        def backend(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CheckoutFailedError):
            await make_service(backend=backend).create_checkout_session(
                CheckoutRequest(price_id="price_500", credits_amount=500),
                TokenContext(bearer_token=USER_TOKEN),
            )

    @pytest.mark.asyncio
    async def test_stripe_not_configured(self):
        gateway = make_gateway()
        gateway.is_configured = False
        with pytest.raises(PaymentsNotConfiguredError):
            await make_service(gateway=gateway).create_checkout_session(
                CheckoutRequest(price_id="price_500", credits_amount=500),
                TokenContext(bearer_token=USER_TOKEN),
            )

    @pytest.mark.asyncio
    async def test_stripe_error(self):
        gateway = make_gateway()
        gateway.create_checkout_session.side_effect = stripe.APIConnectionError("Network down")

        with pytest.raises(CheckoutFailedError) as exc_info:
            await make_service(gateway=gateway).create_checkout_session(
                CheckoutRequest(price_id="price_500", credits_amount=500),
                TokenContext(bearer_token=USER_TOKEN),
            )
        assert "Network down" in exc_info.value.details["stripe_error"]

    @pytest.mark.asyncio
    async def test_session_without_url(self):
        gateway = make_gateway(url=None)
        with pytest.raises(CheckoutFailedError):
            await make_service(gateway=gateway).create_checkout_session(
                CheckoutRequest(price_id="price_500", credits_amount=500),
                TokenContext(bearer_token=USER_TOKEN),
            )


class TestVerifyReload:
    @pytest.mark.asyncio
    async def test_paid_session(self):
        gateway = make_gateway(payment_status="paid", metadata={"credits_amount": "500"})
        result = await make_service(gateway=gateway).verify_reload("cs_test_1")

        assert result.success is True
        assert result.credits_amount == 500
        assert result.payment_status == "paid"
        gateway.retrieve_checkout_session.assert_called_once_with("cs_test_1")

    @pytest.mark.asyncio
    async def test_paid_session_with_unparseable_amount(self):
        gateway = make_gateway(payment_status="paid", metadata={"credits_amount": "lots"})
        result = await make_service(gateway=gateway).verify_reload("cs_test_1")
        assert result.credits_amount is None

    @pytest.mark.asyncio
    async def test_unpaid_session(self):
        gateway = make_gateway(payment_status="unpaid")
        with pytest.raises(PaymentNotCompletedError) as exc_info:
            await make_service(gateway=gateway).verify_reload("cs_test_1")
        assert exc_info.value.details["payment_status"] == "unpaid"

    @pytest.mark.asyncio
    async def test_missing_session_id(self):
        gateway = make_gateway()
        with pytest.raises(MissingSessionIdError):
            await make_service(gateway=gateway).verify_reload(None)
        gateway.retrieve_checkout_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_stripe_error(self):
        gateway = make_gateway()
        gateway.retrieve_checkout_session.side_effect = stripe.InvalidRequestError(
            "No such checkout.session", param="id"
        )
        with pytest.raises(PaymentVerificationError):
            await make_service(gateway=gateway).verify_reload("cs_missing")


class TestHandleWebhook:
    @pytest.mark.asyncio
    async def test_checkout_completed_grants_credits(self):
        backend = FakeBackend()
        payload = stripe_event(
            "checkout.session.completed",
            completed_session(user_id="user-1", credits_amount="500"),
        )

        ack = await webhook_service(backend).handle_webhook(payload.encode(), sign_payload(payload))

        assert ack.received is True
        grants = backend.requests_to("/api/stripe/add-credits")
        assert len(grants) == 1
        assert grants[0].method == "POST"
        assert grants[0].headers["x-webhook-secret"] == TEST_WEBHOOK_SECRET
        assert json.loads(grants[0].content) == {
            "user_id": "user-1",
            "credits_amount": 500,
            "stripe_session_id": "cs_test_1",
            "stripe_payment_intent_id": "pi_test_1",
        }

    @pytest.mark.asyncio
    async def test_grant_uses_backend_webhook_secret(self):
        backend = FakeBackend()
        payload = stripe_event(
            "checkout.session.completed",
            completed_session(user_id="user-1", credits_amount="500"),
        )

        await webhook_service(backend, backend_webhook_secret="backend-shared").handle_webhook(
            payload.encode(), sign_payload(payload)
        )

        grant = backend.requests_to("/api/stripe/add-credits")[0]
        assert grant.headers["x-webhook-secret"] == "backend-shared"

    @pytest.mark.asyncio
    async def test_expanded_payment_intent(self):
        backend = FakeBackend()
        session = completed_session(user_id="user-1", credits_amount="500")
        session["payment_intent"] = {"id": "pi_expanded", "object": "payment_intent"}
        payload = stripe_event("checkout.session.completed", session)

        await webhook_service(backend).handle_webhook(payload.encode(), sign_payload(payload))

        grant = backend.requests_to("/api/stripe/add-credits")[0]
        assert json.loads(grant.content)["stripe_payment_intent_id"] == "pi_expanded"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "metadata",
        [
            {"credits_amount": "500"},
            {"user_id": "user-1"},
            {"user_id": "user-1", "credits_amount": "five hundred"},
            {},
        ],
    )
    async def test_missing_metadata_is_acknowledged_without_grant(self, metadata, caplog):
        backend = FakeBackend()
        payload = stripe_event("checkout.session.completed", completed_session(**metadata))

        with caplog.at_level(logging.ERROR):
            ack = await webhook_service(backend).handle_webhook(
                payload.encode(), sign_payload(payload)
            )

        assert ack.received is True
        assert backend.requests_to("/api/stripe/add-credits") == []
        assert "Missing metadata in checkout session: cs_test_1" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "session",
        [
            {"id": "cs_test_1", "metadata": ["user-1", "500"]},
            {"id": "cs_test_1", "metadata": "user-1"},
            {"id": "cs_test_1", "metadata": None},
            {"metadata": {"user_id": "user-1", "credits_amount": "500"}},
            {"id": "cs_test_1", "metadata": {"user_id": 42, "credits_amount": "500"}},
            {"id": 7, "metadata": {"user_id": "user-1", "credits_amount": "500"}},
        ],
    )
    async def test_malformed_session_is_acknowledged_without_grant(self, session, caplog):
        backend = FakeBackend()
        payload = stripe_event("checkout.session.completed", session)

        with caplog.at_level(logging.ERROR):
            ack = await webhook_service(backend).handle_webhook(
                payload.encode(), sign_payload(payload)
            )

        assert ack.received is True
        assert backend.requests_to("/api/stripe/add-credits") == []
        assert "checkout session" in caplog.text

    @pytest.mark.asyncio
    async def test_backend_failure_is_logged_and_acknowledged(self, caplog):
        backend = FakeBackend(add_credits_status=500)
        payload = stripe_event(
            "checkout.session.completed",
            completed_session(user_id="user-1", credits_amount="500"),
        )

        with caplog.at_level(logging.ERROR):
            ack = await webhook_service(backend).handle_webhook(
                payload.encode(), sign_payload(payload)
            )

        assert ack.received is True
        assert "Failed to add credits" in caplog.text

    @pytest.mark.asyncio
    async def test_backend_unreachable_is_acknowledged(self, caplog):
        payload = stripe_event(
            "checkout.session.completed",
            completed_session(user_id="user-1", credits_amount="500"),
        )

        def backend(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with caplog.at_level(logging.ERROR):
            ack = await webhook_service(backend).handle_webhook(
                payload.encode(), sign_payload(payload)
            )

        assert ack.received is True
        assert "backend unreachable" in caplog.text

    @pytest.mark.asyncio
    async def test_redelivery_forwards_same_session_id(self):
        """The backend deduplicates grants by Stripe session id."""
        backend = FakeBackend()
        payload = stripe_event(
            "checkout.session.completed",
            completed_session(user_id="user-1", credits_amount="500"),
        )
        service = webhook_service(backend)

        await service.handle_webhook(payload.encode(), sign_payload(payload))
        await service.handle_webhook(payload.encode(), sign_payload(payload))

        grants = backend.requests_to("/api/stripe/add-credits")
        assert [json.loads(g.content)["stripe_session_id"] for g in grants] == [
            "cs_test_1",
            "cs_test_1",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "event_type, obj",
        [
            ("payment_intent.succeeded", {"id": "pi_1", "metadata": {"type": "auto_reload", "user_id": "u1"}}),
            ("payment_intent.succeeded", {"id": "pi_2", "metadata": {}}),
            (
                "payment_intent.payment_failed",
                {
                    "id": "pi_3",
                    "metadata": {"type": "auto_reload", "user_id": "u1"},
                    "last_payment_error": {"message": "Your card was declined."},
                },
            ),
            ("setup_intent.succeeded", {"id": "seti_1", "customer": "cus_1"}),
            ("payment_method.detached", {"id": "pm_1", "customer": None}),
            ("customer.created", {"id": "cus_1"}),
        ],
    )
    async def test_other_events_are_acknowledged_without_grant(self, event_type, obj):
        backend = FakeBackend()
        payload = stripe_event(event_type, obj)

        ack = await webhook_service(backend).handle_webhook(payload.encode(), sign_payload(payload))

        assert ack.received is True
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_auto_reload_failure_is_logged(self, caplog):
        payload = stripe_event(
            "payment_intent.payment_failed",
            {
                "id": "pi_3",
                "metadata": {"type": "auto_reload", "user_id": "u1"},
                "last_payment_error": {"message": "Your card was declined."},
            },
        )

        with caplog.at_level(logging.ERROR):
            await webhook_service(FakeBackend()).handle_webhook(
                payload.encode(), sign_payload(payload)
            )

        assert "Auto-reload failed for user u1: Your card was declined." in caplog.text

    @pytest.mark.asyncio
    async def test_missing_signature(self):
        backend = FakeBackend()
        payload = stripe_event("checkout.session.completed", completed_session())
        with pytest.raises(MissingSignatureError):
            await webhook_service(backend).handle_webhook(payload.encode(), None)
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_invalid_signature_has_no_side_effects(self):
        backend = FakeBackend()
        payload = stripe_event(
            "checkout.session.completed",
            completed_session(user_id="user-1", credits_amount="500"),
        )
        with pytest.raises(WebhookVerificationError):
            await webhook_service(backend).handle_webhook(
                payload.encode(), sign_payload(payload, secret="whsec_forged")
            )
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_webhook_secret_not_configured(self):
        payload = stripe_event("checkout.session.completed", completed_session())
        with pytest.raises(PaymentsNotConfiguredError):
            await webhook_service(FakeBackend(), stripe_webhook_secret="").handle_webhook(
                payload.encode(), sign_payload(payload)
            )


class TestAutoReloadSettings:
    @pytest.mark.asyncio
    async def test_returns_backend_projection(self):
        backend = FakeBackend(auto_reload={
            "enabled": True,
            "threshold": 50,
            "reload_amount": 500,
            "has_payment_method": True,
            "failed_attempts": 1,
            "stripe_customer_id": "cus_hidden",
        })
        result = await make_service(backend=backend).get_auto_reload_settings(
            TokenContext(bearer_token=USER_TOKEN)
        )

        assert result.enabled is True
        assert result.threshold == 50
        assert result.reload_amount == 500
        assert result.failed_attempts == 1
        assert "stripe_customer_id" not in result.model_dump()

    @pytest.mark.asyncio
    async def test_uses_effective_token(self):
        backend = FakeBackend()
        await make_service(backend=backend).get_auto_reload_settings(
            TokenContext(bearer_token="admin-token", impersonation_token=IMPERSONATION_TOKEN)
        )
        call = backend.requests_to("/api/stripe/auto-reload")[0]
        assert call.headers["Authorization"] == f"Bearer {IMPERSONATION_TOKEN}"

    @pytest.mark.asyncio
    async def test_backend_error_is_relayed(self):
        with pytest.raises(UpstreamError) as exc_info:
            await make_service().get_auto_reload_settings(TokenContext(bearer_token="expired"))
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_projection(self):
        backend = FakeBackend(auto_reload={"enabled": "sometimes", "threshold": "low"})
        with pytest.raises(ExternalServiceError):
            await make_service(backend=backend).get_auto_reload_settings(
                TokenContext(bearer_token=USER_TOKEN)
            )


class TestInterface:
    def test_implements_protocol(self):
        assert isinstance(make_service(), IBillingService)
