"""Signature verification against the live stripe SDK (no network needed)."""

from __future__ import annotations

import json
import time

import pytest

from paperai.core.errors import VerificationError
from paperai.integrations.stripe.gateway import RecordingPaymentGateway, StripeGateway
from paperai.integrations.stripe.webhook import construct_event

SECRET = "whsec_verifier_secret"


def _body(event_type: str = "product.created") -> bytes:
    return json.dumps(
        {
            "id": "evt_verify_1",
            "type": event_type,
            "data": {"object": {"id": "prod_1", "name": "Pro"}},
        }
    ).encode()


class TestStripeGatewayVerification:
    def test_valid_signature_returns_typed_event(self, sign):
        body = _body()
        event = construct_event(body, sign(body, SECRET), secret=SECRET, gateway=StripeGateway())

        assert event.id == "evt_verify_1"
        assert event.type == "product.created"
        assert event.payload == {"id": "prod_1", "name": "Pro"}

    def test_tampered_body_rejected(self, sign):
        body = _body()
        header = sign(body, SECRET)
        tampered = _body("price.created")

        with pytest.raises(VerificationError) as exc:
            construct_event(tampered, header, secret=SECRET, gateway=StripeGateway())
        assert exc.value.message.startswith("Webhook Error: ")
        assert exc.value.status_code == 400

    def test_wrong_secret_rejected(self, sign):
        body = _body()
        with pytest.raises(VerificationError):
            construct_event(body, sign(body, "whsec_other"), secret=SECRET, gateway=StripeGateway())

    def test_expired_timestamp_rejected(self, sign):
        body = _body()
        header = sign(body, SECRET, timestamp=int(time.time()) - 3600)
        with pytest.raises(VerificationError):
            construct_event(body, header, secret=SECRET, gateway=StripeGateway())

    def test_garbage_header_rejected(self):
        with pytest.raises(VerificationError):
            construct_event(_body(), "not-a-stripe-header", secret=SECRET, gateway=StripeGateway())

    def test_signed_but_not_json_rejected(self, sign):
        body = b"definitely not json"
        with pytest.raises(VerificationError) as exc:
            construct_event(body, sign(body, SECRET), secret=SECRET, gateway=StripeGateway())
        assert exc.value.message.startswith("Webhook Error: ")

    def test_signed_envelope_without_type_rejected(self, sign):
        body = json.dumps({"id": "evt_1", "data": {"object": {}}}).encode()
        with pytest.raises(VerificationError):
            construct_event(body, sign(body, SECRET), secret=SECRET, gateway=StripeGateway())


class TestMissingInputs:
    """Absent header or secret is an explicit 400, never a silent abort."""

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature(self, signature):
        gateway = RecordingPaymentGateway()
        with pytest.raises(VerificationError) as exc:
            construct_event(_body(), signature, secret=SECRET, gateway=gateway)
        assert exc.value.message == "Missing Stripe-Signature header"
        assert gateway.calls == []

    @pytest.mark.parametrize("secret", [None, ""])
    def test_missing_secret(self, secret):
        gateway = RecordingPaymentGateway()
        with pytest.raises(VerificationError) as exc:
            construct_event(_body(), "test-signature", secret=secret, gateway=gateway)
        assert exc.value.message == "Webhook secret is not configured"
        assert gateway.calls == []


class TestRecordingGateway:
    def test_accepts_configured_signature(self):
        gateway = RecordingPaymentGateway(accepted_signature="ok")
        event = construct_event(_body(), "ok", secret=SECRET, gateway=gateway)
        assert event.type == "product.created"
        assert gateway.calls == [("construct_event", "ok")]

    def test_rejects_other_signature(self):
        gateway = RecordingPaymentGateway(accepted_signature="ok")
        with pytest.raises(VerificationError):
            construct_event(_body(), "nope", secret=SECRET, gateway=gateway)
