from typing import Final

# Event types the billing webhook acts on. Everything else is acknowledged and dropped.
PRODUCT_CREATED: Final[str] = "product.created"
PRODUCT_UPDATED: Final[str] = "product.updated"
PRICE_CREATED: Final[str] = "price.created"
PRICE_UPDATED: Final[str] = "price.updated"
CHECKOUT_SESSION_COMPLETED: Final[str] = "checkout.session.completed"
SUBSCRIPTION_CREATED: Final[str] = "customer.subscription.created"
SUBSCRIPTION_UPDATED: Final[str] = "customer.subscription.updated"
SUBSCRIPTION_DELETED: Final[str] = "customer.subscription.deleted"

RELEVANT_EVENT_TYPES: set[str] = {
    # Catalog
    PRODUCT_CREATED,
    PRODUCT_UPDATED,
    PRICE_CREATED,
    PRICE_UPDATED,

    # Checkout
    CHECKOUT_SESSION_COMPLETED,

    # Subscriptions
    SUBSCRIPTION_CREATED,
    SUBSCRIPTION_UPDATED,
    SUBSCRIPTION_DELETED,
}

# checkout.session.completed modes
CHECKOUT_MODE_SUBSCRIPTION: Final[str] = "subscription"
CHECKOUT_MODE_PAYMENT: Final[str] = "payment"
