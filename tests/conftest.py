"""Shared fixtures for the billing webhook test suite."""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from paperai.api.deps import get_billing_store, get_mailer, get_payment_gateway, get_settings
from paperai.core.config import Settings
from paperai.integrations.resend.mailer import RecordingMailer
from paperai.integrations.stripe.gateway import RecordingPaymentGateway
from paperai.main import app
from paperai.services.billing_store import RecordingBillingStore

WEBHOOK_SECRET = "whsec_test_secret"
FAKE_SIGNATURE = "test-signature"


def stripe_signature(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Compute a valid Stripe-Signature header (v1 scheme)."""
    ts = timestamp or int(time.time())
    digest = hmac.new(secret.encode(), f"{ts}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


@pytest.fixture()
def sign() -> Callable[..., str]:
    return stripe_signature


@pytest.fixture()
def app_settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        stripe_webhook_secret=WEBHOOK_SECRET,
        email_from="team@paperai.life",
    )


@pytest.fixture()
def gateway() -> RecordingPaymentGateway:
    return RecordingPaymentGateway(accepted_signature=FAKE_SIGNATURE)


@pytest.fixture()
def store() -> RecordingBillingStore:
    return RecordingBillingStore()


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def client(app_settings, gateway, store, mailer):
    app.dependency_overrides[get_settings] = lambda: app_settings
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_billing_store] = lambda: store
    app.dependency_overrides[get_mailer] = lambda: mailer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_event() -> Callable[..., dict[str, Any]]:
    def _make(event_type: str, obj: dict[str, Any], event_id: str = "evt_1PaperAI") -> dict[str, Any]:
        return {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "created": 1760000000,
            "livemode": False,
            "data": {"object": obj},
        }

    return _make


@pytest.fixture()
def post_event(client) -> Callable[..., Any]:
    def _post(event: dict[str, Any], signature: str | None = FAKE_SIGNATURE):
        headers = {"Content-Type": "application/json"}
        if signature is not None:
            headers["Stripe-Signature"] = signature
        return client.post("/api/v1/stripe/webhook", content=json.dumps(event), headers=headers)

    return _post


@pytest.fixture()
def subscription_obj() -> dict[str, Any]:
    return {
        "id": "sub_123",
        "object": "subscription",
        "customer": "cus_123",
        "status": "active",
        "cancel_at_period_end": False,
    }


@pytest.fixture()
def checkout_session() -> Callable[..., dict[str, Any]]:
    def _session(mode: str = "subscription", email: str | None = "ada@example.com") -> dict[str, Any]:
        session: dict[str, Any] = {
            "id": "cs_test_123",
            "object": "checkout.session",
            "mode": mode,
            "customer": "cus_123",
            "subscription": "sub_123" if mode == "subscription" else None,
            "payment_intent": "pi_123" if mode == "payment" else None,
            "customer_details": {"email": email, "name": "Ada Lovelace"},
        }
        return session

    return _session
