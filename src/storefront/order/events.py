"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of order line dicts
    line_count = Integer(required=True)
    total = Float(required=True)
    status = String(required=True)
    payment = String()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderLineStatusChanged:
    """A seller moved one order line through fulfillment."""

    __version__ = 1

    order_id = Identifier(required=True)
    line_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """The aggregate order status moved after a line status change."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderLinesReassigned:
    """Order lines of a retired seller were handed to a placeholder owner."""

    __version__ = 1

    order_id = Identifier(required=True)
    line_ids = Text(required=True)  # JSON: list of line ids
    previous_seller_id = Identifier(required=True)
    new_seller_id = Identifier(required=True)
