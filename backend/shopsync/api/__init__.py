"""
PURPOSE: API router initialization and exports for shopsync.

This module aggregates the webhook and dashboard refresh routers into a
single api_router that is included in the main FastAPI application.
"""

from fastapi import APIRouter

from shopsync.api.routes_webhook import router as webhook_router
from shopsync.api.routes_refresh import router as refresh_router

# Create the main API router
api_router = APIRouter(prefix="/api", tags=["api"])

# Include all sub-routers
api_router.include_router(webhook_router, tags=["webhook"])
api_router.include_router(refresh_router, tags=["dashboard"])

__all__ = ["api_router"]
