from __future__ import annotations

import json
from typing import Any, Optional, Protocol

import stripe

from paperai.core.config import settings


class PaymentGateway(Protocol):
    def construct_event(self, payload: bytes, signature: str, secret: str) -> dict[str, Any]:
        """Verify the signature and return the parsed event envelope. Raises on failure."""
        ...

    def retrieve_subscription(self, subscription_id: str) -> dict[str, Any]:
        ...


class StripeGateway:
    """Live gateway backed by the stripe SDK."""

    def __init__(self, api_key: Optional[str] = None, tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE):
        self.api_key = api_key
        self.tolerance = tolerance

    def construct_event(self, payload: bytes, signature: str, secret: str) -> dict[str, Any]:
        body = payload.decode("utf-8")
        stripe.WebhookSignature.verify_header(body, signature, secret, self.tolerance)
        return json.loads(body)

    def retrieve_subscription(self, subscription_id: str) -> dict[str, Any]:
        if not self.api_key:
            raise RuntimeError("STRIPE_API_KEY is not set")

        subscription = stripe.Subscription.retrieve(
            subscription_id,
            api_key=self.api_key,
            expand=["default_payment_method"],
        )
        return subscription.to_dict()


def default_gateway() -> StripeGateway:
    key = settings.stripe_api_key
    return StripeGateway(api_key=key.get_secret_value() if key else None)


class RecordingPaymentGateway:
    """In-memory gateway for tests and local runs.

    Accepts exactly one signature value and serves subscriptions from a dict.
    """

    def __init__(
        self,
        *,
        accepted_signature: str = "test-signature",
        subscriptions: Optional[dict[str, dict[str, Any]]] = None,
    ):
        self.accepted_signature = accepted_signature
        self.subscriptions = dict(subscriptions or {})
        self.calls: list[tuple[str, Any]] = []

    def construct_event(self, payload: bytes, signature: str, secret: str) -> dict[str, Any]:
        self.calls.append(("construct_event", signature))
        if signature != self.accepted_signature:
            raise stripe.SignatureVerificationError(
                "No signatures found matching the expected signature for payload",
                signature,
                payload,
            )
        return json.loads(payload)

    def retrieve_subscription(self, subscription_id: str) -> dict[str, Any]:
        self.calls.append(("retrieve_subscription", subscription_id))
        try:
            return self.subscriptions[subscription_id]
        except KeyError:
            raise LookupError(f"No such subscription: '{subscription_id}'") from None
