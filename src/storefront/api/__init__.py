"""Storefront API package."""

from storefront.api.errors import register_exception_handlers
from storefront.api.routes import cart_router, line_item_router, order_router, product_router, seller_router

__all__ = [
    "product_router",
    "seller_router",
    "line_item_router",
    "cart_router",
    "order_router",
    "register_exception_handlers",
]
