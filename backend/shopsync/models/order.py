from uuid import UUID, uuid4
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, Integer, Numeric, Text, DateTime, Uuid, UniqueConstraint, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from shopsync.db.base import Base, TimestampMixin


class ShopifyOrder(Base, TimestampMixin):
    """Order projection built from orders/* webhooks."""

    __tablename__ = "shopify_orders"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4
    )
    store_id: Mapped[str] = mapped_column(String(100), nullable=False)
    shopify_order_id: Mapped[str] = mapped_column(String(64), nullable=False)
    shopify_customer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    order_number: Mapped[int] = mapped_column(Integer, default=0)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    subtotal_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    total_tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    financial_status: Mapped[str] = mapped_column(String(32), default="unknown")
    fulfillment_status: Mapped[str] = mapped_column(String(32), default="unfulfilled")
    order_status_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancel_reason: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    line_item_count: Mapped[int] = mapped_column(Integer, default=0)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False
    )

    __table_args__ = (
        UniqueConstraint("store_id", "shopify_order_id", name="uq_shopify_orders_store_order"),
        Index("ix_shopify_orders_store_customer", "store_id", "shopify_customer_id"),
    )
