"""
PURPOSE: Dashboard refresh API routes for the shopsync service.

POST records that data changed (called by the webhook refresh notifier);
GET reports the last refresh time and whether it is recent enough for the
dashboard to show a "just updated" hint.

CALLED BY:
    - shopsync.services.refresh_service.RefreshNotifier (POST)
    - Dashboard frontend polling (GET)
"""

from typing import Any, Dict

from fastapi import APIRouter, Request

from shopsync.config.settings import settings
from shopsync.core.rate_limit import limiter, READ_LIMIT
from shopsync.schemas.refresh import RefreshRequest
from shopsync.services.refresh_service import get_refresh_state
from shopsync.utils.logger import get_logger
from shopsync.utils.time_utils import get_utc_now

logger = get_logger(__name__)

router = APIRouter(tags=["dashboard"])


@router.post("/refresh-dashboard")
async def trigger_refresh(body: RefreshRequest) -> Dict[str, Any]:
    """
    PURPOSE: Record a dashboard refresh triggered by a webhook.

    Not rate limited: every call comes from this service's own notifier, and
    the refresh time must be overwritten on each one.

    Returns:
        dict: {success, message, event, timestamp}
    """
    timestamp = get_refresh_state().mark(body.event)

    logger.info(
        "dashboard_refresh_triggered",
        refresh_event=body.event,
        timestamp=timestamp.isoformat(),
        has_data=bool(body.data),
    )

    return {
        "success": True,
        "message": "Dashboard refresh triggered",
        "event": body.event,
        "timestamp": timestamp.isoformat(),
    }


@router.get("/refresh-dashboard")
@limiter.limit(READ_LIMIT)
async def refresh_status(request: Request) -> Dict[str, Any]:
    """
    PURPOSE: Report the last refresh time and whether it is within the freshness window.

    Before the first refresh the current time is reported with
    hasRecentRefresh = false.

    Returns:
        dict: {message, timestamp, hasRecentRefresh}
    """
    state = get_refresh_state()
    last_refresh = state.last_refresh

    return {
        "message": "Dashboard refresh endpoint is active",
        "timestamp": (last_refresh or get_utc_now()).isoformat(),
        "hasRecentRefresh": state.has_recent_refresh(settings.REFRESH_FRESHNESS_SECONDS),
    }
