"""
PURPOSE: Tests for the webhook EventRouter.

Tests cover:
- Topic table coverage and ignored topics
- Schema validation failures raised as MalformedPayloadError
- Storage failures reported as FAILED with the transaction rolled back
- Correlation data and refresh flags for order updates
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from shopsync.config.constants import WebhookTopic
from shopsync.models import ShopifyOrder
from shopsync.schemas import OrderPayload
from shopsync.services import OrderService
from shopsync.webhook.errors import MalformedPayloadError
from shopsync.webhook.results import HandlerStatus
from shopsync.webhook.routing import DEFAULT_ROUTES, EventRouter, Route

STORE = "test-store"


async def _order_count(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(ShopifyOrder))


class TestRoutingTable:
    """Test the default topic table."""

    def test_every_topic_is_routed(self):
        router = EventRouter()
        for topic in WebhookTopic:
            assert router.is_handled(topic.value)

    def test_only_order_updates_notify(self):
        notifying = sorted(topic for topic, route in DEFAULT_ROUTES.items() if route.notify_refresh)
        assert notifying == ["orders/cancelled", "orders/fulfilled", "orders/updated"]

    def test_unknown_topics_not_handled(self):
        router = EventRouter()
        assert not router.is_handled("app/uninstalled")
        assert not router.is_handled(None)
        assert not router.is_handled("")


class TestDispatch:
    """Test EventRouter.dispatch."""

    async def test_unknown_topic_ignored_without_writes(self, async_session, session_factory):
        result = await EventRouter().dispatch(async_session, STORE, "app/uninstalled", {"id": 1})

        assert result.status is HandlerStatus.IGNORED
        assert result.should_notify is False
        assert await _order_count(session_factory) == 0

    async def test_missing_topic_ignored(self, async_session):
        result = await EventRouter().dispatch(async_session, STORE, None, {"id": 1})
        assert result.status is HandlerStatus.IGNORED
        assert result.topic is None

    async def test_create_commits(self, async_session, session_factory):
        result = await EventRouter().dispatch(
            async_session, STORE, "orders/create", {"id": 123, "total_price": "50.00"}
        )

        assert result.status is HandlerStatus.APPLIED
        assert result.record_id == "123"
        assert result.should_notify is False
        assert await _order_count(session_factory) == 1

    async def test_order_update_correlation(self, async_session):
        router = EventRouter()
        await router.dispatch(async_session, STORE, "orders/create", {"id": 123, "customer": {"id": 9}})

        result = await router.dispatch(
            async_session, STORE, "orders/updated", {"id": 123, "total_price": "75.00", "customer": {"id": 9}}
        )

        assert result.status is HandlerStatus.APPLIED
        assert result.should_notify is True
        assert result.correlation == {"orderId": "123", "customerId": "9"}

    async def test_update_for_missing_order_does_not_notify(self, async_session):
        result = await EventRouter().dispatch(async_session, STORE, "orders/fulfilled", {"id": 555})

        assert result.status is HandlerStatus.NOT_FOUND
        assert result.should_notify is False

    async def test_schema_mismatch_raises(self, async_session):
        with pytest.raises(MalformedPayloadError) as exc_info:
            await EventRouter().dispatch(async_session, STORE, "orders/create", {"total_price": "50.00"})
        assert exc_info.value.topic == "orders/create"

    async def test_non_object_payload_raises(self, async_session):
        with pytest.raises(MalformedPayloadError):
            await EventRouter().dispatch(async_session, STORE, "customers/create", [1, 2, 3])

    async def test_storage_failure_rolls_back(self, async_session, session_factory):
        """A storage error after a write is rolled back and reported as FAILED."""

        async def create_then_fail(db, store_id, payload):
            await OrderService.create(db, store_id, payload)
            raise OperationalError("UPDATE shopify_customers", {}, Exception("database is locked"))

        router = EventRouter({"orders/create": Route(OrderPayload, create_then_fail)})
        result = await router.dispatch(async_session, STORE, "orders/create", {"id": 123})

        assert result.status is HandlerStatus.FAILED
        assert result.failed is True
        assert result.error == "OperationalError"
        assert await _order_count(session_factory) == 0
