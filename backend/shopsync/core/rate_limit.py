"""
PURPOSE: Rate limiting configuration for the shopsync API using slowapi.

Provides a shared Limiter instance keyed by client IP address and the
rate limit applied to the dashboard-facing read endpoint:
    - READ_LIMIT: relaxed (300/minute) for refresh status polling

Shopify webhook routes and POST /api/refresh-dashboard are not limited:
Shopify delivers in bursts and treats 429 responses as failures, and the
refresh POST is called by this service's own notifier once per order update.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from shopsync.config.settings import settings

# Shared limiter instance keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# ── Rate limit tiers ──────────────────────────────────────────
READ_LIMIT = "300/minute"
