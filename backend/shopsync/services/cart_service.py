"""
Cart service for the shopsync webhook service.

PURPOSE: Keep the latest snapshot of each storefront cart from carts/* webhooks.

CALLED BY: shopsync.webhook.routing (carts/* topics)
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopsync.db.upsert import insert_if_absent
from shopsync.models.cart import ShopifyCart
from shopsync.schemas.shopify import CartPayload
from shopsync.utils.logger import get_logger
from shopsync.webhook.results import HandlerStatus


logger = get_logger("services.cart")


class CartService:
    """Service for cart snapshots keyed by (store_id, shopify_cart_id)."""

    @staticmethod
    async def create(
        db: AsyncSession,
        store_id: str,
        payload: CartPayload
    ) -> HandlerStatus:
        """
        Insert a cart snapshot unless one already exists.

        CALLED BY: carts/create topic
        """
        inserted = await insert_if_absent(
            db,
            ShopifyCart,
            {
                "store_id": store_id,
                "shopify_cart_id": payload.id,
                "token": payload.token,
                "shopify_customer_id": payload.customer_id,
                "line_item_count": len(payload.line_items),
                "total_price": payload.total_price,
                "currency": payload.currency,
                "created_at": payload.created_at,
                "updated_at": payload.updated_at,
            },
            index_elements=("store_id", "shopify_cart_id"),
        )

        if not inserted:
            logger.info("cart_create_duplicate", store_id=store_id, cart_id=payload.id)
            return HandlerStatus.DUPLICATE

        logger.info(
            "cart_created",
            store_id=store_id,
            cart_id=payload.id,
            line_items=len(payload.line_items),
            total_price=str(payload.total_price),
        )
        return HandlerStatus.APPLIED

    @staticmethod
    async def update(
        db: AsyncSession,
        store_id: str,
        payload: CartPayload
    ) -> HandlerStatus:
        """
        Replace the stored snapshot of an existing cart.

        CALLED BY: carts/update topic
        """
        stmt = (
            select(ShopifyCart)
            .where(
                ShopifyCart.store_id == store_id,
                ShopifyCart.shopify_cart_id == payload.id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        cart = result.scalar_one_or_none()

        if not cart:
            logger.warning("cart_update_target_missing", store_id=store_id, cart_id=payload.id)
            return HandlerStatus.NOT_FOUND

        cart.token = payload.token or cart.token
        if payload.customer_id:
            cart.shopify_customer_id = payload.customer_id
        cart.line_item_count = len(payload.line_items)
        cart.total_price = payload.total_price
        cart.currency = payload.currency
        cart.updated_at = payload.updated_at

        logger.info("cart_updated", store_id=store_id, cart_id=payload.id)
        return HandlerStatus.APPLIED
