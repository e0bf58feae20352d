"""
PURPOSE: Webhook module for shopsync. Handles inbound Shopify webhooks.

Provides HMAC signature verification, the topic → handler routing table,
and the typed results and errors shared by handlers and routes.
"""
