from uuid import UUID, uuid4
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, Integer, Numeric, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shopsync.db.base import Base, TimestampMixin


class ShopifyCustomer(Base, TimestampMixin):
    """Customer projection with a running total-spent accumulator.

    total_spent is only changed through CustomerService.apply_total_spent_delta,
    which issues a single atomic increment.
    """

    __tablename__ = "shopify_customers"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4
    )
    store_id: Mapped[str] = mapped_column(String(100), nullable=False)
    shopify_customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    orders_count: Mapped[int] = mapped_column(Integer, default=0)
    total_spent: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)

    __table_args__ = (
        UniqueConstraint("store_id", "shopify_customer_id", name="uq_shopify_customers_store_customer"),
    )
