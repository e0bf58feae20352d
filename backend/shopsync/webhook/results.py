"""
Typed outcome of a webhook handler.

Handlers report what happened instead of swallowing storage errors, so the
route can decide which HTTP status Shopify sees.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class HandlerStatus(str, Enum):
    """What a handler did with a webhook."""

    APPLIED = "applied"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass
class HandlerResult:
    """
    Outcome of dispatching one webhook.

    Attributes:
        topic: Webhook topic that was dispatched (None when the header was absent)
        status: What the handler did
        record_id: External ID of the affected record
        correlation: Data forwarded to the dashboard refresh notification
        notify_refresh: Whether the dashboard should be told about this change
        error: Error description when status is FAILED
    """

    topic: Optional[str]
    status: HandlerStatus
    record_id: Optional[str] = None
    correlation: Dict[str, Any] = field(default_factory=dict)
    notify_refresh: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status is HandlerStatus.FAILED

    @property
    def should_notify(self) -> bool:
        """True when a refresh notification should be sent for this result."""
        return self.notify_refresh and self.status is HandlerStatus.APPLIED
