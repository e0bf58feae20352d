"""
Order service for the shopsync webhook service.

PURPOSE: Persist orders/* webhooks. Creates are idempotent inserts; updates
(including fulfilled and cancelled events) modify the stored row and move the
owning customer's total_spent by the change in order total.

CALLED BY: shopsync.webhook.routing (orders/* topics)
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopsync.db.upsert import insert_if_absent
from shopsync.models.order import ShopifyOrder
from shopsync.schemas.shopify import OrderPayload
from shopsync.services.customer_service import CustomerService
from shopsync.utils.logger import get_logger
from shopsync.webhook.results import HandlerStatus


logger = get_logger("services.order")


class OrderService:
    """
    Service for order records.

    PURPOSE: Map Shopify order payloads onto ShopifyOrder rows keyed by
    (store_id, shopify_order_id).

    CALLED BY: Event router handlers
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        store_id: str,
        payload: OrderPayload
    ) -> HandlerStatus:
        """
        Insert an order unless one already exists for (store_id, id).

        PURPOSE: Handle orders/create. Shopify may redeliver the event; the
        redelivery is a no-op so it cannot roll back totals written by a
        later orders/updated.

        CALLED BY: orders/create topic

        Args:
            db: Async database session (not committed here)
            store_id: Store the webhook belongs to
            payload: Validated order payload

        Returns:
            HandlerStatus.APPLIED when inserted, DUPLICATE when already present
        """
        logger.info(
            "order_create_started",
            store_id=store_id,
            order_id=payload.id,
            order_number=payload.order_number,
            total_price=str(payload.total_price),
            currency=payload.currency,
            customer_id=payload.customer_id,
            line_items=len(payload.line_items),
        )

        inserted = await insert_if_absent(
            db,
            ShopifyOrder,
            {
                "store_id": store_id,
                "shopify_order_id": payload.id,
                "shopify_customer_id": payload.customer_id,
                "email": payload.contact_email,
                "order_number": payload.order_number,
                "total_price": payload.total_price,
                "subtotal_price": payload.subtotal_price,
                "total_tax": payload.total_tax,
                "currency": payload.currency,
                "financial_status": payload.financial_status,
                "fulfillment_status": payload.fulfillment_status,
                "order_status_url": payload.order_status_url,
                "cancel_reason": payload.cancel_reason,
                "cancelled_at": payload.cancelled_at,
                "line_item_count": len(payload.line_items),
                "processed_at": payload.processed_at,
                "created_at": payload.created_at,
                "updated_at": payload.updated_at,
            },
            index_elements=("store_id", "shopify_order_id"),
        )

        if not inserted:
            logger.info("order_create_duplicate", store_id=store_id, order_id=payload.id)
            return HandlerStatus.DUPLICATE

        logger.info("order_created", store_id=store_id, order_id=payload.id)
        return HandlerStatus.APPLIED

    @staticmethod
    async def update(
        db: AsyncSession,
        store_id: str,
        payload: OrderPayload
    ) -> HandlerStatus:
        """
        Apply an order update and propagate the total change to the customer.

        PURPOSE: Handle orders/updated, orders/fulfilled and orders/cancelled.
        The order row is locked for the rest of the transaction so concurrent
        updates of the same order read each other's totals in sequence; the
        customer delta itself is an atomic SQL increment. When the payload names
        a different customer than the stored one, the order is relinked and its
        whole total moves from the old customer to the new one.

        CALLED BY: orders/updated, orders/fulfilled, orders/cancelled topics

        Args:
            db: Async database session (not committed here)
            store_id: Store the webhook belongs to
            payload: Validated order payload

        Returns:
            HandlerStatus.APPLIED, or NOT_FOUND when no row matches
        """
        stmt = (
            select(ShopifyOrder)
            .where(
                ShopifyOrder.store_id == store_id,
                ShopifyOrder.shopify_order_id == payload.id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        order = result.scalar_one_or_none()

        if not order:
            logger.warning("order_update_target_missing", store_id=store_id, order_id=payload.id)
            return HandlerStatus.NOT_FOUND

        previous_total = order.total_price if order.total_price is not None else Decimal("0")

        order.total_price = payload.total_price
        order.subtotal_price = payload.subtotal_price
        order.total_tax = payload.total_tax
        order.financial_status = payload.financial_status
        order.fulfillment_status = payload.fulfillment_status
        order.updated_at = payload.updated_at
        if payload.cancel_reason is not None:
            order.cancel_reason = payload.cancel_reason
        if payload.cancelled_at is not None:
            order.cancelled_at = payload.cancelled_at
        if payload.line_items:
            order.line_item_count = len(payload.line_items)
        stored_customer_id = order.shopify_customer_id
        customer_id = payload.customer_id or stored_customer_id
        order.shopify_customer_id = customer_id

        logger.info(
            "order_updated",
            store_id=store_id,
            order_id=payload.id,
            financial_status=payload.financial_status,
            fulfillment_status=payload.fulfillment_status,
            previous_total=str(previous_total),
            total_price=str(payload.total_price),
        )

        if stored_customer_id and customer_id != stored_customer_id:
            # Reassigned order: the previous total leaves the old customer and
            # the new total is credited to the new one.
            logger.info(
                "order_customer_reassigned",
                store_id=store_id,
                order_id=payload.id,
                previous_customer_id=stored_customer_id,
                customer_id=customer_id,
            )
            if previous_total:
                await CustomerService.apply_total_spent_delta(
                    db, store_id, stored_customer_id, -previous_total
                )
            if payload.total_price:
                await CustomerService.apply_total_spent_delta(
                    db, store_id, customer_id, payload.total_price
                )
            return HandlerStatus.APPLIED

        delta = payload.total_price - previous_total
        if delta and customer_id:
            await CustomerService.apply_total_spent_delta(db, store_id, customer_id, delta)

        return HandlerStatus.APPLIED
