"""
Product service for the shopsync webhook service.

PURPOSE: Persist products/* webhooks as descriptive ShopifyProduct rows.

CALLED BY: shopsync.webhook.routing (products/* topics)
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopsync.db.upsert import insert_if_absent
from shopsync.models.product import ShopifyProduct
from shopsync.schemas.shopify import ProductPayload
from shopsync.utils.logger import get_logger
from shopsync.webhook.results import HandlerStatus


logger = get_logger("services.product")


class ProductService:
    """Service for product records keyed by (store_id, shopify_product_id)."""

    @staticmethod
    async def create(
        db: AsyncSession,
        store_id: str,
        payload: ProductPayload
    ) -> HandlerStatus:
        """
        Insert a product unless one already exists for (store_id, id).

        CALLED BY: products/create topic

        Returns:
            HandlerStatus.APPLIED when inserted, DUPLICATE when already present
        """
        inserted = await insert_if_absent(
            db,
            ShopifyProduct,
            {
                "store_id": store_id,
                "shopify_product_id": payload.id,
                "title": payload.title,
                "handle": payload.handle,
                "vendor": payload.vendor,
                "product_type": payload.product_type,
                "status": payload.status,
                "variant_count": len(payload.variants),
                "created_at": payload.created_at,
                "updated_at": payload.updated_at,
            },
            index_elements=("store_id", "shopify_product_id"),
        )

        if not inserted:
            logger.info("product_create_duplicate", store_id=store_id, product_id=payload.id)
            return HandlerStatus.DUPLICATE

        logger.info(
            "product_created",
            store_id=store_id,
            product_id=payload.id,
            title=payload.title,
            variants=len(payload.variants),
        )
        return HandlerStatus.APPLIED

    @staticmethod
    async def update(
        db: AsyncSession,
        store_id: str,
        payload: ProductPayload
    ) -> HandlerStatus:
        """
        Overwrite the descriptive fields of an existing product.

        CALLED BY: products/update topic

        Returns:
            HandlerStatus.APPLIED, or NOT_FOUND when no row matches
        """
        stmt = (
            select(ShopifyProduct)
            .where(
                ShopifyProduct.store_id == store_id,
                ShopifyProduct.shopify_product_id == payload.id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        product = result.scalar_one_or_none()

        if not product:
            logger.warning("product_update_target_missing", store_id=store_id, product_id=payload.id)
            return HandlerStatus.NOT_FOUND

        product.title = payload.title
        product.handle = payload.handle
        product.vendor = payload.vendor
        product.product_type = payload.product_type
        product.status = payload.status
        product.variant_count = len(payload.variants)
        product.updated_at = payload.updated_at

        logger.info("product_updated", store_id=store_id, product_id=payload.id)
        return HandlerStatus.APPLIED
