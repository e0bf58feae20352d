"""
Shopify webhook payload schemas.

Each inbound topic is validated into one of these models before a handler
touches the database. The models apply the field defaulting rules:
money strings that fail to parse become 0, missing statuses become the
"unknown"/"unfulfilled" sentinels, and missing timestamps become the
processing time. Only `id` is required. Unknown fields are ignored.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shopsync.config.constants import DEFAULT_CURRENCY, FinancialStatus, FulfillmentStatus
from shopsync.utils.time_utils import get_utc_now, parse_timestamp
from shopsync.utils.validators import (
    ZERO,
    normalize_external_id,
    parse_int,
    parse_money,
    parse_order_number,
)


def _required_id(value: Any) -> str:
    external_id = normalize_external_id(value)
    if external_id is None:
        raise ValueError("id is required")
    return external_id


def _timestamp_or_now(value: Any) -> datetime:
    return parse_timestamp(value) or get_utc_now()


def _list_or_empty(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


class ShopifyPayload(BaseModel):
    """
    Base model for Shopify resource payloads.

    Attributes:
        id: External Shopify identifier, stored as a string
        created_at: Resource creation time (defaults to processing time)
        updated_at: Resource last-update time (defaults to processing time)
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: datetime = Field(default_factory=get_utc_now)
    updated_at: datetime = Field(default_factory=get_utc_now)

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        """Coerce numeric IDs to strings and reject blanks."""
        return _required_id(v)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def default_timestamps(cls, v: Any) -> datetime:
        """Fall back to the processing time when a timestamp is null or unparseable."""
        return _timestamp_or_now(v)


class CustomerRef(BaseModel):
    """Customer reference embedded in order payloads."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    email: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> Optional[str]:
        """Coerce numeric IDs to strings."""
        return normalize_external_id(v)


class OrderPayload(ShopifyPayload):
    """
    Payload for orders/create, orders/updated, orders/fulfilled and orders/cancelled.

    Attributes:
        order_number: Sequential order number, falls back to the digits in `name`
        total_price: Order total, 0 when absent or unparseable
        subtotal_price: Subtotal, falls back to total_price when absent or 0
        total_tax: Tax total, 0 when absent or unparseable
        financial_status: Payment status, "unknown" when absent
        fulfillment_status: Fulfillment status, "unfulfilled" when absent
    """

    email: Optional[str] = None
    name: Optional[str] = None
    order_number: int = 0
    customer: Optional[CustomerRef] = None
    total_price: Decimal = ZERO
    subtotal_price: Optional[Decimal] = None
    total_tax: Decimal = ZERO
    currency: str = DEFAULT_CURRENCY
    financial_status: str = FinancialStatus.UNKNOWN.value
    fulfillment_status: str = FulfillmentStatus.UNFULFILLED.value
    order_status_url: Optional[str] = None
    cancel_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    line_items: List[Dict[str, Any]] = Field(default_factory=list)
    processed_at: datetime = Field(default_factory=get_utc_now)

    @field_validator("total_price", "total_tax", mode="before")
    @classmethod
    def validate_money(cls, v: Any) -> Decimal:
        """Parse money strings, defaulting to 0."""
        return parse_money(v)

    @field_validator("subtotal_price", mode="before")
    @classmethod
    def validate_subtotal(cls, v: Any) -> Optional[Decimal]:
        """Parse subtotal; None is resolved against total_price afterwards."""
        if v is None:
            return None
        return parse_money(v)

    @field_validator("order_number", mode="before")
    @classmethod
    def validate_order_number(cls, v: Any) -> int:
        """Parse order number, defaulting to 0."""
        return parse_int(v)

    @field_validator("currency", mode="before")
    @classmethod
    def validate_currency(cls, v: Any) -> str:
        """Uppercase currency code, defaulting to USD."""
        if not v:
            return DEFAULT_CURRENCY
        return str(v).upper()

    @field_validator("financial_status", mode="before")
    @classmethod
    def validate_financial_status(cls, v: Any) -> str:
        """Default a missing financial status to "unknown"."""
        return str(v).lower() if v else FinancialStatus.UNKNOWN.value

    @field_validator("fulfillment_status", mode="before")
    @classmethod
    def validate_fulfillment_status(cls, v: Any) -> str:
        """Default a missing fulfillment status to "unfulfilled"."""
        return str(v).lower() if v else FulfillmentStatus.UNFULFILLED.value

    @field_validator("cancelled_at", mode="before")
    @classmethod
    def validate_cancelled_at(cls, v: Any) -> Optional[datetime]:
        """Cancellation time stays empty unless Shopify sends one."""
        return parse_timestamp(v)

    @field_validator("processed_at", mode="before")
    @classmethod
    def validate_processed_at(cls, v: Any) -> datetime:
        """Fall back to the processing time."""
        return _timestamp_or_now(v)

    @field_validator("line_items", mode="before")
    @classmethod
    def validate_line_items(cls, v: Any) -> List[Any]:
        """Treat null or non-list line items as empty."""
        return _list_or_empty(v)

    @model_validator(mode="after")
    def resolve_fallbacks(self) -> "OrderPayload":
        """Resolve subtotal and order number fallbacks that depend on other fields."""
        if not self.subtotal_price:
            self.subtotal_price = self.total_price
        if not self.order_number:
            self.order_number = parse_order_number(None, self.name)
        return self

    @property
    def customer_id(self) -> Optional[str]:
        """External ID of the customer who placed the order, if any."""
        return self.customer.id if self.customer else None

    @property
    def contact_email(self) -> Optional[str]:
        """Customer email, falling back to the order email."""
        if self.customer and self.customer.email:
            return self.customer.email
        return self.email


class CustomerPayload(ShopifyPayload):
    """
    Payload for customers/create and customers/update.

    Attributes:
        total_spent: Lifetime spend reported by Shopify; only used to seed new rows
    """

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    state: Optional[str] = None
    orders_count: int = 0
    total_spent: Decimal = ZERO

    @field_validator("total_spent", mode="before")
    @classmethod
    def validate_total_spent(cls, v: Any) -> Decimal:
        """Parse money strings, defaulting to 0."""
        return parse_money(v)

    @field_validator("orders_count", mode="before")
    @classmethod
    def validate_orders_count(cls, v: Any) -> int:
        """Parse order count, defaulting to 0."""
        return parse_int(v)


class ProductPayload(ShopifyPayload):
    """Payload for products/create and products/update."""

    title: str = ""
    handle: Optional[str] = None
    vendor: str = ""
    product_type: Optional[str] = None
    status: Optional[str] = None
    variants: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("title", "vendor", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str:
        """Null text fields become empty strings."""
        return "" if v is None else str(v)

    @field_validator("variants", mode="before")
    @classmethod
    def validate_variants(cls, v: Any) -> List[Any]:
        """Treat null or non-list variants as empty."""
        return _list_or_empty(v)


class CartPayload(ShopifyPayload):
    """
    Payload for carts/create and carts/update.

    Shopify identifies carts by token; when `id` is absent the token is used.
    When no cart-level total is sent, the total is summed from line prices.
    """

    token: Optional[str] = None
    customer_id: Optional[str] = None
    line_items: List[Dict[str, Any]] = Field(default_factory=list)
    total_price: Decimal = ZERO
    currency: str = DEFAULT_CURRENCY

    @model_validator(mode="before")
    @classmethod
    def default_id_from_token(cls, data: Any) -> Any:
        """Use the cart token as its identifier when `id` is missing."""
        if isinstance(data, dict) and data.get("id") in (None, "") and data.get("token"):
            data = {**data, "id": data["token"]}
        return data

    @field_validator("customer_id", mode="before")
    @classmethod
    def validate_customer_id(cls, v: Any) -> Optional[str]:
        """Coerce numeric IDs to strings."""
        return normalize_external_id(v)

    @field_validator("total_price", mode="before")
    @classmethod
    def validate_total_price(cls, v: Any) -> Decimal:
        """Parse money strings, defaulting to 0."""
        return parse_money(v)

    @field_validator("currency", mode="before")
    @classmethod
    def validate_currency(cls, v: Any) -> str:
        """Uppercase currency code, defaulting to USD."""
        if not v:
            return DEFAULT_CURRENCY
        return str(v).upper()

    @field_validator("line_items", mode="before")
    @classmethod
    def validate_line_items(cls, v: Any) -> List[Any]:
        """Treat null or non-list line items as empty."""
        return _list_or_empty(v)

    @model_validator(mode="after")
    def resolve_total(self) -> "CartPayload":
        """Sum line prices when the cart total is missing."""
        if not self.total_price and self.line_items:
            self.total_price = sum(
                (parse_money(item.get("line_price")) for item in self.line_items),
                ZERO,
            )
        return self
