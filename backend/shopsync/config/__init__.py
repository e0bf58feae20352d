"""
PURPOSE: Export configuration settings and constants for shopsync.

This module centralizes access to all configuration settings and constants
used throughout the webhook service.
"""

from .constants import (
    DEFAULT_CURRENCY,
    FinancialStatus,
    FulfillmentStatus,
    WebhookTopic,
)
from .settings import settings

__all__ = [
    "settings",
    "WebhookTopic",
    "FinancialStatus",
    "FulfillmentStatus",
    "DEFAULT_CURRENCY",
]
