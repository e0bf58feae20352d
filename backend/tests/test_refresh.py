"""
PURPOSE: Tests for dashboard refresh notification and the refresh endpoints.

Tests cover:
- RefreshState freshness window
- RefreshNotifier success, rejection, timeout and connection failure
- POST/GET /api/refresh-dashboard
"""

import json
from datetime import datetime, timedelta, timezone

import httpx

from shopsync.config.settings import Settings, settings
from shopsync.core.rate_limit import limiter
from shopsync.services.refresh_service import RefreshNotifier, RefreshState, get_refresh_state

ENDPOINT = "http://dashboard.test/api/refresh-dashboard"


class TestRefreshState:
    """Test process-local refresh state."""

    def test_initial_state(self):
        state = RefreshState()
        assert state.last_refresh is None
        assert state.has_recent_refresh(10.0) is False

    def test_mark_within_window(self):
        state = RefreshState()
        moment = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        state.mark("orders/updated", now=moment)

        assert state.last_event == "orders/updated"
        assert state.has_recent_refresh(10.0, now=moment + timedelta(seconds=5)) is True
        assert state.has_recent_refresh(10.0, now=moment + timedelta(seconds=11)) is False

    def test_mark_overwrites(self):
        state = RefreshState()
        first = datetime(2024, 1, 1, tzinfo=timezone.utc)
        second = first + timedelta(minutes=1)
        state.mark("a", now=first)
        state.mark("b", now=second)

        assert state.last_refresh == second
        assert state.last_event == "b"

    def test_reset(self):
        state = RefreshState()
        state.mark("orders/updated")
        state.reset()
        assert state.last_refresh is None
        assert state.last_event is None


class TestRefreshNotifier:
    """Test outbound refresh notifications."""

    async def test_posts_event_and_data(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((str(request.url), json.loads(request.content)))
            return httpx.Response(200, json={"success": True})

        notifier = RefreshNotifier(ENDPOINT, timeout=3.0, transport=httpx.MockTransport(handler))
        ok = await notifier.notify("orders/updated", {"orderId": "123", "customerId": "9"})

        assert ok is True
        assert seen == [
            (ENDPOINT, {"event": "orders/updated", "data": {"orderId": "123", "customerId": "9"}})
        ]

    async def test_non_2xx_returns_false(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        notifier = RefreshNotifier(ENDPOINT, timeout=3.0, transport=transport)

        assert await notifier.notify("orders/updated") is False

    async def test_timeout_returns_false(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        notifier = RefreshNotifier(ENDPOINT, timeout=0.1, transport=httpx.MockTransport(handler))

        assert await notifier.notify("orders/updated", {"orderId": "1"}) is False

    async def test_connection_error_returns_false(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        notifier = RefreshNotifier(ENDPOINT, timeout=3.0, transport=httpx.MockTransport(handler))

        assert await notifier.notify("orders/cancelled") is False

    def test_endpoint_built_from_app_url(self, monkeypatch):
        monkeypatch.setattr(settings, "APP_URL", "https://dash.example.com/")
        assert settings.refresh_endpoint == "https://dash.example.com/api/refresh-dashboard"

    def test_default_endpoint_is_this_service(self):
        """Out of the box the notifier targets this service's own refresh route on port 8000."""
        assert Settings.model_fields["APP_URL"].default == "http://localhost:8000"


class TestRefreshRoutes:
    """Test the refresh dashboard endpoints."""

    async def test_status_before_any_refresh(self, client):
        resp = await client.get("/api/refresh-dashboard")

        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "Dashboard refresh endpoint is active"
        assert data["hasRecentRefresh"] is False
        assert datetime.fromisoformat(data["timestamp"]).tzinfo is not None

    async def test_trigger_then_status(self, client):
        resp = await client.post(
            "/api/refresh-dashboard",
            json={"event": "orders/updated", "data": {"orderId": "123"}},
        )

        assert resp.status_code == 200
        posted = resp.json()
        assert posted["success"] is True
        assert posted["message"] == "Dashboard refresh triggered"
        assert posted["event"] == "orders/updated"

        status = (await client.get("/api/refresh-dashboard")).json()
        assert status["hasRecentRefresh"] is True
        assert status["timestamp"] == posted["timestamp"]
        assert get_refresh_state().last_event == "orders/updated"

    async def test_stale_refresh_reported(self, client):
        get_refresh_state().mark("orders/updated", now=datetime.now(timezone.utc) - timedelta(minutes=5))

        status = (await client.get("/api/refresh-dashboard")).json()

        assert status["hasRecentRefresh"] is False

    async def test_trigger_never_rate_limited(self, client, monkeypatch):
        """A burst of notifier calls from one address keeps updating the refresh time."""
        monkeypatch.setattr(limiter, "enabled", True)

        statuses = []
        for _ in range(35):
            resp = await client.post("/api/refresh-dashboard", json={"event": "orders/updated"})
            statuses.append(resp.status_code)

        assert statuses == [200] * 35
        status = await client.get("/api/refresh-dashboard")
        assert status.status_code == 200
        assert status.json()["hasRecentRefresh"] is True

    async def test_trigger_with_empty_body(self, client):
        resp = await client.post("/api/refresh-dashboard", json={})

        assert resp.status_code == 200
        assert resp.json()["event"] is None


class TestRootEndpoint:
    """Test the service info endpoint."""

    async def test_root(self, client):
        resp = await client.get("/")

        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["service"] == "shopsync"
