"""
Webhook processing exceptions.
"""

from typing import Optional


class WebhookError(Exception):
    """Base exception for webhook processing."""

    def __init__(self, message: str, topic: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.topic = topic


class MalformedPayloadError(WebhookError):
    """Payload is not valid JSON or does not match the topic's schema.

    Shopify redelivering the same body will not help, so the route answers 400.
    """
