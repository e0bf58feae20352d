from uuid import UUID, uuid4
from typing import Optional
from sqlalchemy import String, Integer, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shopsync.db.base import Base, TimestampMixin


class ShopifyProduct(Base, TimestampMixin):
    """Descriptive product projection; holds no derived aggregates."""

    __tablename__ = "shopify_products"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4
    )
    store_id: Mapped[str] = mapped_column(String(100), nullable=False)
    shopify_product_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), default="")
    handle: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    vendor: Mapped[str] = mapped_column(String(255), default="")
    product_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    variant_count: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        UniqueConstraint("store_id", "shopify_product_id", name="uq_shopify_products_store_product"),
    )
