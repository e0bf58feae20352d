"""
Customer service for the shopsync webhook service.

PURPOSE: Persist customers/* webhooks and own the customer total-spent
accumulator. total_spent is never overwritten from a payload after the row
exists; it only moves by signed deltas applied atomically in SQL.

CALLED BY: shopsync.webhook.routing (customers/* topics),
shopsync.services.order_service (order total changes)
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shopsync.db.upsert import insert_if_absent
from shopsync.models.customer import ShopifyCustomer
from shopsync.schemas.shopify import CustomerPayload
from shopsync.utils.logger import get_logger
from shopsync.utils.time_utils import get_utc_now
from shopsync.webhook.results import HandlerStatus


logger = get_logger("services.customer")


class CustomerService:
    """
    Service for customer records.

    PURPOSE: Insert customers idempotently, apply contact updates, and adjust
    the running total-spent by deltas.

    CALLED BY: Event router handlers and OrderService.update
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        store_id: str,
        payload: CustomerPayload
    ) -> HandlerStatus:
        """
        Insert a customer unless one already exists for (store_id, id).

        PURPOSE: Handle customers/create. Redeliveries leave the existing row
        untouched so a stale create cannot reset an accumulated total.

        CALLED BY: customers/create topic

        Args:
            db: Async database session (not committed here)
            store_id: Store the webhook belongs to
            payload: Validated customer payload

        Returns:
            HandlerStatus.APPLIED when inserted, DUPLICATE when already present
        """
        inserted = await insert_if_absent(
            db,
            ShopifyCustomer,
            {
                "store_id": store_id,
                "shopify_customer_id": payload.id,
                "email": payload.email,
                "first_name": payload.first_name,
                "last_name": payload.last_name,
                "phone": payload.phone,
                "state": payload.state,
                "orders_count": payload.orders_count,
                "total_spent": payload.total_spent,
                "created_at": payload.created_at,
                "updated_at": payload.updated_at,
            },
            index_elements=("store_id", "shopify_customer_id"),
        )

        if not inserted:
            logger.info("customer_create_duplicate", store_id=store_id, customer_id=payload.id)
            return HandlerStatus.DUPLICATE

        logger.info(
            "customer_created",
            store_id=store_id,
            customer_id=payload.id,
            total_spent=str(payload.total_spent),
        )
        return HandlerStatus.APPLIED

    @staticmethod
    async def update(
        db: AsyncSession,
        store_id: str,
        payload: CustomerPayload
    ) -> HandlerStatus:
        """
        Apply contact field updates to an existing customer.

        PURPOSE: Handle customers/update. total_spent is deliberately left
        alone; it is maintained from order deltas.

        CALLED BY: customers/update topic

        Args:
            db: Async database session (not committed here)
            store_id: Store the webhook belongs to
            payload: Validated customer payload

        Returns:
            HandlerStatus.APPLIED, or NOT_FOUND when no row matches
        """
        stmt = (
            select(ShopifyCustomer)
            .where(
                ShopifyCustomer.store_id == store_id,
                ShopifyCustomer.shopify_customer_id == payload.id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        customer = result.scalar_one_or_none()

        if not customer:
            logger.warning("customer_update_target_missing", store_id=store_id, customer_id=payload.id)
            return HandlerStatus.NOT_FOUND

        customer.email = payload.email
        customer.first_name = payload.first_name
        customer.last_name = payload.last_name
        customer.phone = payload.phone
        customer.state = payload.state
        customer.orders_count = payload.orders_count
        customer.updated_at = payload.updated_at

        logger.info("customer_updated", store_id=store_id, customer_id=payload.id)
        return HandlerStatus.APPLIED

    @staticmethod
    async def apply_total_spent_delta(
        db: AsyncSession,
        store_id: str,
        customer_id: str,
        delta: Decimal
    ) -> Optional[Decimal]:
        """
        Add a signed delta to a customer's total_spent in one atomic statement.

        PURPOSE: Keep total_spent correct when several order webhooks for the
        same customer are processed concurrently. The increment happens in the
        database (UPDATE ... SET total_spent = total_spent + :delta), so no
        read-modify-write window exists in the application.

        CALLED BY: OrderService.update

        Args:
            db: Async database session (not committed here)
            store_id: Store the customer belongs to
            customer_id: External Shopify customer ID
            delta: Signed amount to add

        Returns:
            The new total_spent, or None if the customer does not exist
        """
        stmt = (
            update(ShopifyCustomer)
            .where(
                ShopifyCustomer.store_id == store_id,
                ShopifyCustomer.shopify_customer_id == customer_id,
            )
            .values(
                total_spent=ShopifyCustomer.total_spent + delta,
                updated_at=get_utc_now(),
            )
            .returning(ShopifyCustomer.total_spent)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        new_total = result.scalar_one_or_none()

        if new_total is None:
            logger.warning(
                "customer_total_spent_target_missing",
                store_id=store_id,
                customer_id=customer_id,
                delta=str(delta),
            )
            return None

        logger.info(
            "customer_total_spent_adjusted",
            store_id=store_id,
            customer_id=customer_id,
            delta=str(delta),
            total_spent=str(new_total),
        )
        return new_total
