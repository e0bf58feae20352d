"""
PURPOSE: Event router for Shopify webhooks.

Maps a webhook topic (the X-Shopify-Topic header, or the resource/event path
on per-resource routes) to the payload schema and service handler for that
topic, runs exactly one handler inside the request's database transaction,
and turns the outcome into a HandlerResult.

Unknown topics are acknowledged without touching storage so Shopify does not
keep redelivering events this service intentionally ignores.

CALLED BY:
    - shopsync/api/routes_webhook.py
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopsync.config.constants import WebhookTopic
from shopsync.schemas.shopify import (
    CartPayload,
    CustomerPayload,
    OrderPayload,
    ProductPayload,
    ShopifyPayload,
)
from shopsync.services.cart_service import CartService
from shopsync.services.customer_service import CustomerService
from shopsync.services.order_service import OrderService
from shopsync.services.product_service import ProductService
from shopsync.utils.logger import get_logger
from shopsync.webhook.errors import MalformedPayloadError
from shopsync.webhook.results import HandlerResult, HandlerStatus

logger = get_logger(__name__)

Handler = Callable[[AsyncSession, str, Any], Awaitable[HandlerStatus]]


@dataclass(frozen=True)
class Route:
    """
    PURPOSE: One entry of the topic routing table.

    Attributes:
        schema: Payload model the raw JSON is validated into.
        handler: Service coroutine applying the payload to storage.
        notify_refresh: Whether a successful run triggers a dashboard refresh.
    """

    schema: Type[ShopifyPayload]
    handler: Handler
    notify_refresh: bool = False


def _order_correlation(payload: OrderPayload) -> Dict[str, Any]:
    return {"orderId": payload.id, "customerId": payload.customer_id}


DEFAULT_ROUTES: Dict[str, Route] = {
    # Order events
    WebhookTopic.ORDERS_CREATE.value: Route(OrderPayload, OrderService.create),
    WebhookTopic.ORDERS_UPDATED.value: Route(OrderPayload, OrderService.update, notify_refresh=True),
    WebhookTopic.ORDERS_FULFILLED.value: Route(OrderPayload, OrderService.update, notify_refresh=True),
    WebhookTopic.ORDERS_CANCELLED.value: Route(OrderPayload, OrderService.update, notify_refresh=True),
    # Customer events
    WebhookTopic.CUSTOMERS_CREATE.value: Route(CustomerPayload, CustomerService.create),
    WebhookTopic.CUSTOMERS_UPDATE.value: Route(CustomerPayload, CustomerService.update),
    WebhookTopic.CUSTOMERS_UPDATED.value: Route(CustomerPayload, CustomerService.update),
    # Product events
    WebhookTopic.PRODUCTS_CREATE.value: Route(ProductPayload, ProductService.create),
    WebhookTopic.PRODUCTS_UPDATE.value: Route(ProductPayload, ProductService.update),
    # Cart events
    WebhookTopic.CARTS_CREATE.value: Route(CartPayload, CartService.create),
    WebhookTopic.CARTS_UPDATE.value: Route(CartPayload, CartService.update),
}


class EventRouter:
    """
    PURPOSE: Dispatch verified webhook payloads to their topic handler.

    Attributes:
        _routes: Topic → Route mapping.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self._routes: Dict[str, Route] = dict(DEFAULT_ROUTES if routes is None else routes)

    def is_handled(self, topic: Optional[str]) -> bool:
        return bool(topic) and topic in self._routes

    @property
    def topics(self) -> list[str]:
        return sorted(self._routes)

    async def dispatch(
        self,
        db: AsyncSession,
        store_id: str,
        topic: Optional[str],
        payload: Any,
    ) -> HandlerResult:
        """
        PURPOSE: Validate the payload for its topic and run the matching handler.

        The handler's writes are committed here on success and rolled back on
        a storage error. Storage errors are reported as a FAILED result rather
        than raised so the route can choose the HTTP status.

        CALLED BY: routes_webhook._process_webhook()

        Args:
            db: Request-scoped async database session.
            store_id: Store the webhook belongs to.
            topic: Webhook topic, None when the sender omitted it.
            payload: Decoded JSON body.

        Returns:
            HandlerResult: Outcome of the dispatch.

        Raises:
            MalformedPayloadError: If the payload does not match the topic's schema.
        """
        route = self._routes.get(topic) if topic else None
        if route is None:
            logger.info("webhook_topic_ignored", topic=topic)
            return HandlerResult(topic=topic, status=HandlerStatus.IGNORED)

        try:
            parsed = route.schema.model_validate(payload)
        except ValidationError as e:
            logger.warning(
                "webhook_payload_invalid",
                topic=topic,
                error_count=e.error_count(),
                fields=[".".join(str(loc) for loc in err["loc"]) for err in e.errors()],
            )
            raise MalformedPayloadError("Payload does not match topic schema", topic=topic) from e

        correlation = _order_correlation(parsed) if isinstance(parsed, OrderPayload) else {}

        try:
            status = await route.handler(db, store_id, parsed)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                "webhook_storage_failed",
                topic=topic,
                record_id=parsed.id,
                error=str(e),
                exception_type=type(e).__name__,
            )
            return HandlerResult(
                topic=topic,
                status=HandlerStatus.FAILED,
                record_id=parsed.id,
                correlation=correlation,
                notify_refresh=route.notify_refresh,
                error=type(e).__name__,
            )

        logger.info("webhook_dispatched", topic=topic, record_id=parsed.id, status=status.value)
        return HandlerResult(
            topic=topic,
            status=status,
            record_id=parsed.id,
            correlation=correlation,
            notify_refresh=route.notify_refresh,
        )


# ════════════════════════════════════════════════════════════════
# Module-level singleton
# ════════════════════════════════════════════════════════════════

_router_instance: Optional[EventRouter] = None


def get_event_router() -> EventRouter:
    """
    PURPOSE: Return the module-level EventRouter singleton.

    CALLED BY: routes_webhook.py route handlers
    """
    global _router_instance
    if _router_instance is None:
        _router_instance = EventRouter()
    return _router_instance
