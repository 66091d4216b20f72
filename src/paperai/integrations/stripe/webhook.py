from __future__ import annotations

import logging
from typing import Optional

import stripe
from pydantic import ValidationError

from paperai.api.v1.schemas.webhook import WebhookEvent
from paperai.core.errors import VerificationError
from paperai.integrations.stripe.gateway import PaymentGateway

logger = logging.getLogger(__name__)


def construct_event(
    payload: bytes,
    signature: Optional[str],
    *,
    secret: Optional[str],
    gateway: PaymentGateway,
) -> WebhookEvent:
    """
    Verify the Stripe-Signature header and parse the event envelope.

    Raises VerificationError when the header or secret is absent, the signature
    does not match, or the verified body is not a Stripe event envelope.
    """
    if not signature:
        logger.warning("Stripe webhook rejected: missing Stripe-Signature header")
        raise VerificationError("Missing Stripe-Signature header")
    if not secret:
        logger.error("Stripe webhook rejected: STRIPE_WEBHOOK_SECRET is not configured")
        raise VerificationError("Webhook secret is not configured")

    try:
        raw = gateway.construct_event(payload, signature, secret)
        event = WebhookEvent.model_validate(raw)
    except (stripe.SignatureVerificationError, ValueError, ValidationError) as e:
        logger.warning("Stripe webhook verification failed: %s", e)
        raise VerificationError(f"Webhook Error: {e}") from e

    logger.debug("Verified Stripe event %s (%s)", event.id, event.type)
    return event
