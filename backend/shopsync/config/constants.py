"""
PURPOSE: Shared constants for the shopsync webhook service.

Holds the Shopify webhook topic names handled by the event router and the
sentinel values used when a payload omits a status field.
"""

from enum import Enum


class WebhookTopic(str, Enum):
    """Shopify webhook topics with a registered handler."""

    ORDERS_CREATE = "orders/create"
    ORDERS_UPDATED = "orders/updated"
    ORDERS_FULFILLED = "orders/fulfilled"
    ORDERS_CANCELLED = "orders/cancelled"
    CUSTOMERS_CREATE = "customers/create"
    CUSTOMERS_UPDATE = "customers/update"
    # Legacy spelling still configured on older subscriptions
    CUSTOMERS_UPDATED = "customers/updated"
    PRODUCTS_CREATE = "products/create"
    PRODUCTS_UPDATE = "products/update"
    CARTS_CREATE = "carts/create"
    CARTS_UPDATE = "carts/update"


class FinancialStatus(str, Enum):
    """Order financial status values reported by Shopify."""

    UNKNOWN = "unknown"
    PENDING = "pending"
    AUTHORIZED = "authorized"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    PARTIALLY_REFUNDED = "partially_refunded"
    REFUNDED = "refunded"
    VOIDED = "voided"


class FulfillmentStatus(str, Enum):
    """Order fulfillment status values reported by Shopify."""

    UNFULFILLED = "unfulfilled"
    PARTIAL = "partial"
    FULFILLED = "fulfilled"
    RESTOCKED = "restocked"


DEFAULT_CURRENCY = "USD"
