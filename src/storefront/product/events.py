"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductListed:
    """A seller put a new product up for sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)
    listed_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ListingUpdated:
    """A seller edited the details or price of a listing."""

    __version__ = 1

    product_id = Identifier(required=True)
    title = String(required=True)
    price = Float(required=True)
    previous_price = Float(required=True)


@storefront.event(part_of="Product")
class StockLevelSet:
    """The authoritative stock count of a product changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reason = String(required=True)


@storefront.event(part_of="Product")
class ProductRetired:
    """A product was soft-disabled and handed over to a placeholder owner."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_seller_id = Identifier(required=True)
    new_seller_id = Identifier(required=True)
    retired_at = DateTime(required=True)
