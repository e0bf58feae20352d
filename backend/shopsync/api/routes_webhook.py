"""
PURPOSE: Shopify webhook API routes for the shopsync service.

Provides the public inbound endpoints Shopify delivers webhooks to:
    - POST /api/webhook/shopify                      combined route, topic from X-Shopify-Topic
    - POST /api/webhook/shopify/{resource}/{event}   per-resource routes, topic from the path
    - OPTIONS /api/webhook/shopify                   CORS preflight

Endpoints are PUBLIC (Shopify cannot attach credentials). Every request is
authenticated by the X-Shopify-Hmac-Sha256 signature over the raw body,
checked before the body is parsed or any storage is touched.

CALLED BY:
    - Shopify webhook subscriptions (POST, public)
"""

import json
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shopsync.config.settings import settings
from shopsync.db.engine import get_db
from shopsync.services.refresh_service import get_refresh_notifier
from shopsync.utils.logger import get_logger
from shopsync.webhook.errors import MalformedPayloadError
from shopsync.webhook.results import HandlerStatus
from shopsync.webhook.routing import get_event_router
from shopsync.webhook.signing import verify_shopify_hmac

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, x-shopify-topic, x-shopify-hmac-sha256",
}


# ════════════════════════════════════════════════════════════════
# Internal Helpers
# ════════════════════════════════════════════════════════════════


def _error_response(status_code: int, message: str) -> JSONResponse:
    """
    PURPOSE: Build the coarse error body returned to webhook senders.

    No internal detail is included so storage errors never leak schema names.
    """
    return JSONResponse(status_code=status_code, content={"error": message})


async def _process_webhook(
    request: Request,
    topic: Optional[str],
    hmac_header: Optional[str],
    db: AsyncSession,
    background_tasks: BackgroundTasks,
) -> JSONResponse:
    """
    PURPOSE: Verify, decode, dispatch and acknowledge one Shopify webhook.

    Steps:
      1. Read the raw body and verify the HMAC (HTTP 401 on failure).
      2. Decode JSON (HTTP 400 on failure).
      3. Dispatch to the topic handler (HTTP 400 on schema mismatch).
      4. Schedule a dashboard refresh for applied order updates.
      5. Acknowledge with {"success": true, "event": topic}.

    CALLED BY: shopify_webhook(), shopify_resource_webhook()

    Returns:
        JSONResponse: Response for Shopify.
    """
    raw_body = await request.body()

    logger.info("webhook_received", topic=topic, content_length=len(raw_body))

    if not verify_shopify_hmac(raw_body, hmac_header, settings.SHOPIFY_WEBHOOK_SECRET):
        logger.warning(
            "webhook_hmac_invalid",
            topic=topic,
            has_header=bool(hmac_header),
            secret_configured=bool(settings.SHOPIFY_WEBHOOK_SECRET),
        )
        return _error_response(status.HTTP_401_UNAUTHORIZED, "Invalid HMAC")

    try:
        payload: Any = json.loads(raw_body)
    except ValueError as e:
        logger.warning("webhook_payload_not_json", topic=topic, error=str(e))
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid payload")

    try:
        result = await get_event_router().dispatch(db, settings.SHOPIFY_STORE_ID, topic, payload)
    except MalformedPayloadError:
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid payload")
    except Exception as e:
        logger.error(
            "webhook_processing_failed",
            topic=topic,
            error=str(e),
            exception_type=type(e).__name__,
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    if result.failed and settings.WEBHOOK_RETRY_ON_STORAGE_FAILURE:
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Storage unavailable")

    if result.should_notify:
        background_tasks.add_task(get_refresh_notifier().notify, topic, result.correlation)

    content: dict[str, Any] = {"success": True, "event": topic}
    if result.status is HandlerStatus.IGNORED:
        content["message"] = "Event not handled"
    return JSONResponse(content=content)


# ════════════════════════════════════════════════════════════════
# Public Inbound Endpoints
# ════════════════════════════════════════════════════════════════


@router.post("/shopify")
async def shopify_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    x_shopify_topic: Optional[str] = Header(None),
    x_shopify_hmac_sha256: Optional[str] = Header(None),
) -> JSONResponse:
    """
    PURPOSE: Receive any Shopify webhook and route it by its X-Shopify-Topic header.

    Topics without a handler (or a missing topic header) are acknowledged
    with HTTP 200 and no side effects.

    Raises:
        Nothing: all outcomes are mapped to 200 / 400 / 401 / 500 / 503 responses.
    """
    return await _process_webhook(request, x_shopify_topic, x_shopify_hmac_sha256, db, background_tasks)


@router.options("/shopify")
async def shopify_webhook_preflight() -> Response:
    """
    PURPOSE: Answer CORS preflight requests for the combined webhook route.
    """
    return Response(status_code=status.HTTP_200_OK, headers=PREFLIGHT_HEADERS)


@router.post("/shopify/{resource}/{event}")
async def shopify_resource_webhook(
    resource: str,
    event: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    x_shopify_hmac_sha256: Optional[str] = Header(None),
) -> JSONResponse:
    """
    PURPOSE: Receive a Shopify webhook subscribed to a resource-specific URL.

    The topic is taken from the path, e.g. /api/webhook/shopify/orders/updated
    handles "orders/updated" regardless of the X-Shopify-Topic header.
    """
    return await _process_webhook(request, f"{resource}/{event}", x_shopify_hmac_sha256, db, background_tasks)
