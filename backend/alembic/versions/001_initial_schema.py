"""Initial schema for shopsync Shopify projections.

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """
    PURPOSE: Create order, customer, product and cart tables.

    Each table is unique on (store_id, external Shopify id) so webhook
    redeliveries cannot create duplicate rows.
    """
    # Orders Table
    op.create_table(
        "shopify_orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.String(length=100), nullable=False),
        sa.Column("shopify_order_id", sa.String(length=64), nullable=False),
        sa.Column("shopify_customer_id", sa.String(length=64), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("order_number", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("subtotal_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_tax", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("financial_status", sa.String(length=32), nullable=False, server_default="unknown"),
        sa.Column("fulfillment_status", sa.String(length=32), nullable=False, server_default="unfulfilled"),
        sa.Column("order_status_url", sa.Text(), nullable=True),
        sa.Column("cancel_reason", sa.String(length=64), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("line_item_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "shopify_order_id", name="uq_shopify_orders_store_order"),
    )
    op.create_index(
        "ix_shopify_orders_store_customer", "shopify_orders", ["store_id", "shopify_customer_id"]
    )

    # Customers Table
    op.create_table(
        "shopify_customers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.String(length=100), nullable=False),
        sa.Column("shopify_customer_id", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("state", sa.String(length=20), nullable=True),
        sa.Column("orders_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_spent", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "shopify_customer_id", name="uq_shopify_customers_store_customer"),
    )

    # Products Table
    op.create_table(
        "shopify_products",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.String(length=100), nullable=False),
        sa.Column("shopify_product_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("handle", sa.String(length=255), nullable=True),
        sa.Column("vendor", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("product_type", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=True),
        sa.Column("variant_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "shopify_product_id", name="uq_shopify_products_store_product"),
    )

    # Carts Table
    op.create_table(
        "shopify_carts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.String(length=100), nullable=False),
        sa.Column("shopify_cart_id", sa.String(length=128), nullable=False),
        sa.Column("token", sa.String(length=128), nullable=True),
        sa.Column("shopify_customer_id", sa.String(length=64), nullable=True),
        sa.Column("line_item_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "shopify_cart_id", name="uq_shopify_carts_store_cart"),
    )


def downgrade() -> None:
    """
    PURPOSE: Drop all shopsync tables.
    """
    op.drop_table("shopify_carts")
    op.drop_table("shopify_products")
    op.drop_table("shopify_customers")
    op.drop_index("ix_shopify_orders_store_customer", table_name="shopify_orders")
    op.drop_table("shopify_orders")
