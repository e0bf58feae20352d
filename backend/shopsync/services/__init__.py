"""
Business logic layer for the shopsync webhook service.

PURPOSE: Services map validated Shopify payloads onto database rows. They
are stateless, take the request's database session, and leave committing
to the event router that owns the transaction.

CALLED BY: shopsync.webhook.routing, shopsync.api

Services:
    - OrderService: Order inserts and updates, customer total propagation
    - CustomerService: Customer inserts, contact updates, total-spent deltas
    - ProductService: Product inserts and updates
    - CartService: Cart snapshot inserts and updates
    - RefreshNotifier / RefreshState: Dashboard refresh notification and state
"""

from shopsync.services.order_service import OrderService
from shopsync.services.customer_service import CustomerService
from shopsync.services.product_service import ProductService
from shopsync.services.cart_service import CartService
from shopsync.services.refresh_service import (
    RefreshNotifier,
    RefreshState,
    get_refresh_notifier,
    get_refresh_state,
)

__all__ = [
    "OrderService",
    "CustomerService",
    "ProductService",
    "CartService",
    "RefreshNotifier",
    "RefreshState",
    "get_refresh_notifier",
    "get_refresh_state",
]
