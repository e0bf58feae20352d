"""
PURPOSE: Dashboard refresh notification and refresh-state tracking.

RefreshNotifier tells the dashboard service that order data changed by
POSTing to its /api/refresh-dashboard endpoint. The call is fire-and-forget:
it has an explicit timeout, is never retried, and its failure never affects
the webhook response.

RefreshState holds the last refresh time reported by GET /api/refresh-dashboard.
It is process-local and resets on restart; it only drives UI staleness hints.

CALLED BY:
    - shopsync/api/routes_webhook.py (background notification after order updates)
    - shopsync/api/routes_refresh.py (refresh endpoint state)
"""

from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from shopsync.config.settings import settings
from shopsync.utils.logger import get_logger
from shopsync.utils.time_utils import get_utc_now, seconds_since

logger = get_logger(__name__)


class RefreshState:
    """
    PURPOSE: Track when the dashboard data was last refreshed.

    Attributes:
        _last_refresh: Time of the most recent refresh, None until the first one.
        _last_event: Event name that triggered the most recent refresh.
    """

    def __init__(self) -> None:
        self._last_refresh: Optional[datetime] = None
        self._last_event: Optional[str] = None

    @property
    def last_refresh(self) -> Optional[datetime]:
        return self._last_refresh

    @property
    def last_event(self) -> Optional[str]:
        return self._last_event

    def mark(self, event: Optional[str], now: Optional[datetime] = None) -> datetime:
        """
        PURPOSE: Record a refresh, overwriting the previous timestamp.

        Args:
            event: Event name that triggered the refresh.
            now: Refresh time (default: current UTC time).

        Returns:
            datetime: The recorded refresh time.
        """
        self._last_refresh = now or get_utc_now()
        self._last_event = event
        return self._last_refresh

    def has_recent_refresh(self, window_seconds: float, now: Optional[datetime] = None) -> bool:
        """
        PURPOSE: Report whether the last refresh falls within the freshness window.

        Args:
            window_seconds: Freshness window length.
            now: Reference time (default: current UTC time).

        Returns:
            bool: False when no refresh has happened yet.
        """
        if self._last_refresh is None:
            return False
        return seconds_since(self._last_refresh, now) < window_seconds

    def reset(self) -> None:
        self._last_refresh = None
        self._last_event = None


class RefreshNotifier:
    """
    PURPOSE: Send best-effort refresh notifications to the dashboard.

    Attributes:
        endpoint: Absolute URL of the dashboard refresh endpoint.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (default: network transport).
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.transport = transport

    async def notify(self, event: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """
        PURPOSE: POST {event, data} to the dashboard refresh endpoint.

        CALLED BY: FastAPI BackgroundTasks scheduled by the webhook routes.

        Args:
            event: Webhook topic that changed data (e.g. "orders/updated").
            data: Correlation data such as {"orderId": ..., "customerId": ...}.

        Returns:
            bool: True if the dashboard acknowledged with a 2xx status.
        """
        body = {"event": event, "data": data or {}}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(self.endpoint, json=body)
        except httpx.HTTPError as e:
            logger.error(
                "dashboard_refresh_failed",
                refresh_event=event,
                endpoint=self.endpoint,
                error=str(e),
                exception_type=type(e).__name__,
            )
            return False

        if resp.is_success:
            logger.info("dashboard_refresh_sent", refresh_event=event, status_code=resp.status_code)
            return True

        logger.warning(
            "dashboard_refresh_rejected",
            refresh_event=event,
            endpoint=self.endpoint,
            status_code=resp.status_code,
        )
        return False


# ════════════════════════════════════════════════════════════════
# Module-level singletons
# ════════════════════════════════════════════════════════════════

_refresh_state: Optional[RefreshState] = None
_notifier_instance: Optional[RefreshNotifier] = None


def get_refresh_state() -> RefreshState:
    """
    PURPOSE: Return the process-wide RefreshState singleton.

    CALLED BY: routes_refresh.py route handlers
    """
    global _refresh_state
    if _refresh_state is None:
        _refresh_state = RefreshState()
    return _refresh_state


def get_refresh_notifier() -> RefreshNotifier:
    """
    PURPOSE: Return the RefreshNotifier singleton configured from settings.

    CALLED BY: routes_webhook.py route handlers
    """
    global _notifier_instance
    if _notifier_instance is None:
        _notifier_instance = RefreshNotifier(
            endpoint=settings.refresh_endpoint,
            timeout=settings.REFRESH_TIMEOUT_SECONDS,
        )
    return _notifier_instance
