"""
PURPOSE: Pytest fixtures for shopsync tests.

Provides shared test infrastructure including:
- In-memory async SQLite engine with all shopsync tables
- Session factory and a per-test async session
- Webhook secret / store ID overrides and a request signer
- Fake dashboard refresh notifier capturing notifications
- HTTP client bound to the FastAPI app with get_db overridden
"""

import json
from typing import Any

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shopsync.api import routes_webhook
from shopsync.config.settings import settings
from shopsync.core.rate_limit import limiter
from shopsync.db.base import Base
from shopsync.db.engine import get_db
from shopsync.services.refresh_service import get_refresh_state
from shopsync.webhook.signing import compute_shopify_hmac

import shopsync.models  # noqa: F401  (registers tables on Base.metadata)

TEST_SECRET = "test-webhook-secret"
TEST_STORE_ID = "test-store"


@pytest_asyncio.fixture
async def engine():
    """
    PURPOSE: In-memory SQLite engine shared by every session of one test.

    StaticPool keeps a single connection so separate sessions see the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory configured like the application's AsyncSessionLocal."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def async_session(session_factory):
    """
    PURPOSE: Async session for service-level tests.

    Returns:
        AsyncSession: Session bound to the in-memory test database.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def webhook_settings(monkeypatch):
    """
    PURPOSE: Configure the webhook secret and store ID for a test.

    Returns:
        str: The shared secret requests must be signed with.
    """
    monkeypatch.setattr(settings, "SHOPIFY_WEBHOOK_SECRET", TEST_SECRET)
    monkeypatch.setattr(settings, "SHOPIFY_STORE_ID", TEST_STORE_ID)
    monkeypatch.setattr(settings, "WEBHOOK_RETRY_ON_STORAGE_FAILURE", False)
    return TEST_SECRET


@pytest.fixture
def signed():
    """
    PURPOSE: Build a (body, headers) pair for a signed webhook request.

    Returns:
        Callable: signed(payload, topic=None, secret=TEST_SECRET) -> (bytes, dict)
    """

    def _signed(payload: Any, topic: str = None, secret: str = TEST_SECRET):
        body = json.dumps(payload).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Hmac-Sha256": compute_shopify_hmac(body, secret),
        }
        if topic is not None:
            headers["X-Shopify-Topic"] = topic
        return body, headers

    return _signed


class FakeRefreshNotifier:
    """Refresh notifier that records calls instead of sending HTTP requests."""

    def __init__(self) -> None:
        self.calls: list = []

    async def notify(self, event: str, data: Any = None) -> bool:
        self.calls.append((event, data))
        return True


@pytest.fixture
def fake_notifier(monkeypatch):
    """
    PURPOSE: Replace the webhook routes' refresh notifier with a recorder.

    Returns:
        FakeRefreshNotifier: Recorder whose `calls` list the test can inspect.
    """
    notifier = FakeRefreshNotifier()
    monkeypatch.setattr(routes_webhook, "get_refresh_notifier", lambda: notifier)
    return notifier


@pytest.fixture(autouse=True)
def reset_refresh_state():
    """Clear process-wide refresh state between tests."""
    get_refresh_state().reset()
    yield
    get_refresh_state().reset()


@pytest_asyncio.fixture
async def client(session_factory, webhook_settings, fake_notifier, monkeypatch):
    """
    PURPOSE: HTTP client for the FastAPI app backed by the test database.

    ASGITransport does not run the lifespan, so no migrations are attempted.

    Returns:
        httpx.AsyncClient: Client with base URL http://test.
    """
    from shopsync.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    monkeypatch.setattr(limiter, "enabled", False)
    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()
