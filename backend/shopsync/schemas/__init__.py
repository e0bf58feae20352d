"""
Pydantic v2 schemas for the shopsync webhook service.

This module exports the Shopify payload schemas validated at the webhook
boundary and the dashboard refresh request schema.
"""

from .refresh import RefreshRequest
from .shopify import (
    CartPayload,
    CustomerPayload,
    CustomerRef,
    OrderPayload,
    ProductPayload,
    ShopifyPayload,
)

__all__ = [
    # Shopify payload schemas
    "ShopifyPayload",
    "CustomerRef",
    "OrderPayload",
    "CustomerPayload",
    "ProductPayload",
    "CartPayload",
    # Refresh schemas
    "RefreshRequest",
]
