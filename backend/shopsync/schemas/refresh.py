"""
Dashboard refresh Pydantic schemas.

The refresh endpoint accepts an event name and arbitrary correlation data
(e.g. {"orderId": "123", "customerId": "9"}) from webhook handlers.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class RefreshRequest(BaseModel):
    """
    Body of POST /api/refresh-dashboard.

    Attributes:
        event: Name of the event that changed data (e.g. "orders/updated")
        data: Optional correlation data for the change
    """

    model_config = ConfigDict(extra="ignore")

    event: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
