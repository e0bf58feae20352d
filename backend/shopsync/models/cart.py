from uuid import UUID, uuid4
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, Integer, Numeric, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shopsync.db.base import Base, TimestampMixin


class ShopifyCart(Base, TimestampMixin):
    """Cart snapshot built from carts/* webhooks."""

    __tablename__ = "shopify_carts"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4
    )
    store_id: Mapped[str] = mapped_column(String(100), nullable=False)
    shopify_cart_id: Mapped[str] = mapped_column(String(128), nullable=False)
    token: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    shopify_customer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    line_item_count: Mapped[int] = mapped_column(Integer, default=0)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), default="USD")

    __table_args__ = (
        UniqueConstraint("store_id", "shopify_cart_id", name="uq_shopify_carts_store_cart"),
    )
