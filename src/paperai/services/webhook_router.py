"""Stripe event router.

Each relevant event type maps to a planner: a pure function that turns the
event payload into an ordered list of actions. ``apply_actions`` then runs
those actions against the billing store and the mailer. Keeping the planning
pure lets every event type be tested from its payload alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Union

from paperai.api.v1.schemas.webhook import WebhookEvent
from paperai.core import stripe_events as ev
from paperai.core.errors import (
    HandlerFailedError,
    NotificationError,
    UnhandledEventError,
    WebhookValidationError,
)
from paperai.core.stripe_events import RELEVANT_EVENT_TYPES
from paperai.integrations.resend.mailer import Mailer
from paperai.services.billing_store import BillingStore, SubscriptionUpsertRequest, stripe_id
from paperai.services.notifications.templates import (
    PURCHASE_SUBJECT,
    WELCOME_SUBJECT,
    payment_success_html,
)

logger = logging.getLogger(__name__)

MISSING_EMAIL_MESSAGE = "User email is missing in the checkout session."


# -----------------------------
# Actions
# -----------------------------
@dataclass(frozen=True)
class UpsertProduct:
    product: dict[str, Any]


@dataclass(frozen=True)
class UpsertPrice:
    price: dict[str, Any]


@dataclass(frozen=True)
class UpsertSubscription:
    request: SubscriptionUpsertRequest


@dataclass(frozen=True)
class RecordPayment:
    payment_intent_id: str | None
    email: str


@dataclass(frozen=True)
class SendEmail:
    to: str
    subject: str


@dataclass(frozen=True)
class Reject:
    reason: str


Action = Union[UpsertProduct, UpsertPrice, UpsertSubscription, RecordPayment, SendEmail, Reject]
Planner = Callable[[dict[str, Any]], list[Action]]


# -----------------------------
# Planners
# -----------------------------
def plan_product(payload: dict[str, Any]) -> list[Action]:
    return [UpsertProduct(payload)]


def plan_price(payload: dict[str, Any]) -> list[Action]:
    return [UpsertPrice(payload)]


def plan_subscription_change(payload: dict[str, Any]) -> list[Action]:
    # created / updated / deleted all collapse into one upsert
    request = SubscriptionUpsertRequest(
        subscription_id=payload["id"],
        customer_id=stripe_id(payload["customer"]),
        is_create_action=False,
    )
    return [UpsertSubscription(request)]


def _customer_email(session: dict[str, Any]) -> str | None:
    details = session.get("customer_details") or {}
    return details.get("email") or None


def plan_checkout_completed(session: dict[str, Any]) -> list[Action]:
    mode = session.get("mode")
    email = _customer_email(session)

    if mode == ev.CHECKOUT_MODE_SUBSCRIPTION:
        request = SubscriptionUpsertRequest(
            subscription_id=stripe_id(session["subscription"]),
            customer_id=stripe_id(session["customer"]),
            is_create_action=True,
        )
        # the upsert stays applied even when the email check below rejects
        if not email:
            return [UpsertSubscription(request), Reject(MISSING_EMAIL_MESSAGE)]
        return [UpsertSubscription(request), SendEmail(email, WELCOME_SUBJECT)]

    if mode == ev.CHECKOUT_MODE_PAYMENT:
        if not email:
            return [Reject(MISSING_EMAIL_MESSAGE)]
        return [
            RecordPayment(stripe_id(session.get("payment_intent")), email),
            SendEmail(email, PURCHASE_SUBJECT),
        ]

    # setup mode and anything newer: nothing to do
    return []


HANDLERS: dict[str, Planner] = {
    ev.PRODUCT_CREATED: plan_product,
    ev.PRODUCT_UPDATED: plan_product,
    ev.PRICE_CREATED: plan_price,
    ev.PRICE_UPDATED: plan_price,
    ev.SUBSCRIPTION_CREATED: plan_subscription_change,
    ev.SUBSCRIPTION_UPDATED: plan_subscription_change,
    ev.SUBSCRIPTION_DELETED: plan_subscription_change,
    ev.CHECKOUT_SESSION_COMPLETED: plan_checkout_completed,
}


def plan_event(event: WebhookEvent) -> list[Action]:
    planner = HANDLERS.get(event.type)
    if planner is None:
        raise UnhandledEventError(event.type)
    return planner(event.payload)


# -----------------------------
# Execution
# -----------------------------
def apply_actions(
    actions: list[Action],
    *,
    store: BillingStore,
    mailer: Mailer,
    email_from: str,
) -> None:
    for action in actions:
        if isinstance(action, UpsertProduct):
            store.upsert_product(action.product)
        elif isinstance(action, UpsertPrice):
            store.upsert_price(action.price)
        elif isinstance(action, UpsertSubscription):
            store.upsert_user_subscription(action.request)
        elif isinstance(action, RecordPayment):
            logger.info(
                "Payment succeeded: payment_intent=%s email=%s",
                action.payment_intent_id,
                action.email,
            )
        elif isinstance(action, SendEmail):
            _send(mailer, action, email_from=email_from)
        elif isinstance(action, Reject):
            logger.error(action.reason)
            raise WebhookValidationError(action.reason)
        else:
            raise TypeError(f"Unknown action: {action!r}")


def _send(mailer: Mailer, action: SendEmail, *, email_from: str) -> None:
    try:
        receipt = mailer.send_email(
            from_=email_from,
            to=action.to,
            subject=action.subject,
            html=payment_success_html(),
        )
    except Exception as e:
        logger.exception("Failed to send email to %s", action.to)
        raise NotificationError() from e

    logger.info("Email sent successfully: %s", receipt)


def handle_event(
    event: WebhookEvent,
    *,
    store: BillingStore,
    mailer: Mailer,
    email_from: str,
) -> None:
    """Apply a verified event. Irrelevant types are a silent no-op.

    Validation and notification errors keep their own status. Anything else
    raised while planning or mutating becomes HandlerFailedError.
    """
    if event.type not in RELEVANT_EVENT_TYPES:
        logger.info("Ignoring Stripe event %s (%s)", event.id, event.type)
        return

    logger.info("Handling Stripe event %s (%s)", event.id, event.type)

    try:
        actions = plan_event(event)
        apply_actions(actions, store=store, mailer=mailer, email_from=email_from)
    except (WebhookValidationError, NotificationError):
        raise
    except Exception as e:
        logger.exception("Webhook handler failed for %s (%s)", event.id, event.type)
        raise HandlerFailedError() from e
