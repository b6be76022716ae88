"""Storefront bounded context — listings, carts, wishlists and orders.

Reconciles per-user cart and wishlist lines against mutable product stock,
converts a cart into an order at checkout, and keeps each order's aggregate
status in step with the fulfillment status sellers set on individual lines.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

# Domain Composition Root
storefront = Domain(name="storefront")
