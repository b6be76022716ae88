"""Domain events for the LineItem aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="LineItem")
class LineItemAdded:
    """A product variant was put in a user's cart or wishlist."""

    __version__ = 1

    line_item_id = Identifier(required=True)
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String()
    size = String()
    quantity = Integer(required=True)
    status = String(required=True)
    price = Float(required=True)


@storefront.event(part_of="LineItem")
class LineItemQuantityChanged:
    """The quantity of a cart line changed by merge, edit or stock reconciliation."""

    __version__ = 1

    line_item_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    reason = String(required=True)


@storefront.event(part_of="LineItem")
class LineItemMovedToCart:
    """A wishlist line became a cart line."""

    __version__ = 1

    line_item_id = Identifier(required=True)
    user_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.event(part_of="LineItem")
class LineItemOrdered:
    """A cart line was consumed by a placed order."""

    __version__ = 1

    line_item_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)


@storefront.event(part_of="LineItem")
class LineItemRestoredToCart:
    """A line marked as ordered went back to the cart because checkout failed."""

    __version__ = 1

    line_item_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
