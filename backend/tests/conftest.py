"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import hashlib
import hmac
import json
import time
from typing import Any, Callable, Optional

import httpx
import pytest

from api.dependencies import reset_container
from shared.config import Settings, get_settings
from shared.http_client import ServiceClient


BACKEND_URL = "http://backend.test"
ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"
IMPERSONATION_TOKEN = "impersonation-token"
ADMIN_EMAIL = "admin@zamar.app"
TEST_WEBHOOK_SECRET = "whsec_test_secret"

ADMIN_USER = {
    "_id": "admin-1",
    "email": ADMIN_EMAIL,
    "username": "admin",
    "role": "admin",
    "credits": {"count": 0},
}
REGULAR_USER = {
    "_id": "user-1",
    "email": "singer@example.com",
    "username": "singer",
    "credits": {"count": 120, "last_updated": "2026-01-01T00:00:00Z"},
}
IMPERSONATED_USER = {
    "_id": "user-2",
    "email": "guest@example.com",
    "username": "guest",
}


def make_settings(**overrides: Any) -> Settings:
    """Build settings that ignore the environment's .env file."""
    values = {
        "backend_api_url": BACKEND_URL,
        "web_url": "https://zamar.test",
        "admin_email": ADMIN_EMAIL,
        "stripe_secret_key": "sk_test_1234567890abcdef",
        "stripe_webhook_secret": TEST_WEBHOOK_SECRET,
        "locale": "en",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    service: str = "backend",
    base_url: str = BACKEND_URL,
    default_headers: Optional[dict[str, str]] = None,
) -> ServiceClient:
    """Create a ServiceClient whose requests are answered by ``handler``."""
    return ServiceClient(
        service,
        base_url,
        default_headers=default_headers,
        transport=httpx.MockTransport(handler),
    )


def identity_response(request: httpx.Request) -> httpx.Response:
    """Answer ``/api/auth/me`` for the well-known test tokens."""
    auth = request.headers.get("Authorization")
    if auth == f"Bearer {ADMIN_TOKEN}":
        return httpx.Response(200, json={"user": ADMIN_USER})
    if auth == f"Bearer {USER_TOKEN}":
        return httpx.Response(200, json={"user": REGULAR_USER})
    if auth == f"Bearer {IMPERSONATION_TOKEN}":
        return httpx.Response(200, json={"user": IMPERSONATED_USER})
    return httpx.Response(401, json={"error": "Unauthorized"})


def sign_payload(
    payload: str,
    secret: str = TEST_WEBHOOK_SECRET,
    timestamp: Optional[int] = None,
) -> str:
    """Build a ``stripe-signature`` header the way Stripe signs deliveries."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def stripe_event(event_type: str, obj: dict[str, Any], event_id: str = "evt_test_1") -> str:
    """Serialize a Stripe event body."""
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": obj},
    })


class FakeBackend:
    """Records backend calls and answers them like the Zamar backend."""

    def __init__(self, add_credits_status: int = 200, auto_reload: object = None):
        self.calls: list[httpx.Request] = []
        self.add_credits_status = add_credits_status
        self.auto_reload = auto_reload or {"enabled": True, "threshold": 50, "reload_amount": 500}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if request.url.path == "/api/auth/me":
            return identity_response(request)
        if request.url.path == "/api/stripe/add-credits":
            return httpx.Response(self.add_credits_status, json={"success": True})
        if request.url.path == "/api/stripe/auto-reload":
            if request.headers.get("Authorization") not in (
                f"Bearer {USER_TOKEN}",
                f"Bearer {IMPERSONATION_TOKEN}",
            ):
                return httpx.Response(401, json={"error": "Unauthorized"})
            return httpx.Response(200, json=self.auto_reload)
        return httpx.Response(404, json={"error": "Not found"})

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [call for call in self.calls if call.url.path == path]


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and services before and after each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {USER_TOKEN}"}
