from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from paperai.integrations.stripe.gateway import PaymentGateway
from paperai.models.customer import Customer
from paperai.models.price import Price
from paperai.models.product import Product
from paperai.models.subscription import Subscription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionUpsertRequest:
    subscription_id: str
    customer_id: Optional[str]
    is_create_action: bool


class BillingStore(Protocol):
    """Idempotent upserts. Redelivering the same event must be harmless."""

    def upsert_product(self, product: dict[str, Any]) -> None: ...

    def upsert_price(self, price: dict[str, Any]) -> None: ...

    def upsert_user_subscription(self, request: SubscriptionUpsertRequest) -> None: ...


def stripe_id(value: Any) -> Optional[str]:
    """Stripe fields like `customer` are either an id or an expanded object."""
    if isinstance(value, dict):
        return value.get("id")
    return value


def _from_unix(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def _first_item(subscription: dict[str, Any]) -> dict[str, Any]:
    items = (subscription.get("items") or {}).get("data") or []
    return items[0] if items else {}


_ON_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlBillingStore:
    def __init__(self, db: Session, gateway: PaymentGateway):
        self.db = db
        self.gateway = gateway

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _upsert(self, model: type, values: dict[str, Any]) -> None:
        """Single-statement INSERT ... ON CONFLICT (id) DO UPDATE.

        Concurrent deliveries for the same Stripe id (checkout.session.completed and
        customer.subscription.created arrive together) both land; the later write wins.
        """
        insert = _ON_CONFLICT_INSERTS.get(self.db.get_bind().dialect.name)
        if insert is None:
            self._merge_with_retry(model, values)
            return

        stmt = insert(model).values(**values)
        updates = {key: stmt.excluded[key] for key in values if key != "id"}
        updates["updated_at"] = func.now()
        self.db.execute(stmt.on_conflict_do_update(index_elements=["id"], set_=updates))

    def _merge_with_retry(self, model: type, values: dict[str, Any]) -> None:
        # no native upsert: a racing INSERT shows up as IntegrityError, the row exists now
        try:
            self.db.merge(model(**values))
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            self.db.merge(model(**values))

    def upsert_product(self, product: dict[str, Any]) -> None:
        self._upsert(
            Product,
            {
                "id": product["id"],
                "active": product.get("active"),
                "name": product.get("name"),
                "raw": product,
            },
        )
        self._commit()
        logger.info("Product inserted/updated: %s", product["id"])

    def upsert_price(self, price: dict[str, Any]) -> None:
        recurring = price.get("recurring") or {}
        self._upsert(
            Price,
            {
                "id": price["id"],
                "product_id": stripe_id(price.get("product")),
                "active": price.get("active"),
                "currency": price.get("currency"),
                "unit_amount": price.get("unit_amount"),
                "type": price.get("type"),
                "interval": recurring.get("interval"),
                "raw": price,
            },
        )
        self._commit()
        logger.info("Price inserted/updated: %s", price["id"])

    def upsert_user_subscription(self, request: SubscriptionUpsertRequest) -> None:
        # re-read current state from Stripe instead of trusting the payload (out-of-order redelivery)
        subscription = self.gateway.retrieve_subscription(request.subscription_id)
        item = _first_item(subscription)

        # current_period_end moved onto subscription items in newer API versions
        period_end = subscription.get("current_period_end") or item.get("current_period_end")

        subscription_id = subscription.get("id") or request.subscription_id
        customer_id = stripe_id(subscription.get("customer")) or request.customer_id
        status = subscription.get("status")

        self._upsert(
            Subscription,
            {
                "id": subscription_id,
                "customer_id": customer_id,
                "status": status,
                "price_id": stripe_id(item.get("price")),
                "cancel_at_period_end": subscription.get("cancel_at_period_end"),
                "current_period_end": _from_unix(period_end),
                "raw": subscription,
            },
        )

        if request.is_create_action and customer_id:
            self._copy_billing_details(customer_id, subscription)

        self._commit()
        logger.info(
            "Subscription inserted/updated: %s (customer=%s, status=%s)",
            subscription_id,
            customer_id,
            status,
        )

    def _copy_billing_details(self, customer_id: str, subscription: dict[str, Any]) -> None:
        payment_method = subscription.get("default_payment_method")
        if not isinstance(payment_method, dict):
            return

        billing_details = payment_method.get("billing_details")
        if not billing_details:
            return

        self._upsert(
            Customer,
            {
                "id": customer_id,
                "email": billing_details.get("email"),
                "billing_details": billing_details,
            },
        )


class RecordingBillingStore:
    """Records every upsert call in order. Optionally fails on a given method."""

    def __init__(self, *, fail_on: Optional[str] = None, error: Optional[Exception] = None):
        self.fail_on = fail_on
        self.error = error or RuntimeError("database unavailable")
        self.calls: list[tuple[str, Any]] = []

    def _record(self, method: str, arg: Any) -> None:
        self.calls.append((method, arg))
        if method == self.fail_on:
            raise self.error

    def upsert_product(self, product: dict[str, Any]) -> None:
        self._record("upsert_product", product)

    def upsert_price(self, price: dict[str, Any]) -> None:
        self._record("upsert_price", price)

    def upsert_user_subscription(self, request: SubscriptionUpsertRequest) -> None:
        self._record("upsert_user_subscription", request)
