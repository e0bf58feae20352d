"""Database models for the shopsync webhook service.

Import all models here so Alembic can detect them during migration generation.
"""

from shopsync.models.order import ShopifyOrder
from shopsync.models.customer import ShopifyCustomer
from shopsync.models.product import ShopifyProduct
from shopsync.models.cart import ShopifyCart

__all__ = [
    "ShopifyOrder",
    "ShopifyCustomer",
    "ShopifyProduct",
    "ShopifyCart",
]
