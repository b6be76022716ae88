"""Order aggregate — an immutable record of one checkout.

Quantities, prices and sellers are frozen when the order is placed. The only
things that move afterwards are per-line fulfillment statuses, each governed
by the seller who owns the line, and the order status derived from them.

Line status moves:
    PENDING → CONFIRMED → SHIPPED → DELIVERED  (forward only, steps may be skipped)
    any non-cancelled state → CANCELLED

Order status derivation:
    any line CANCELLED → CANCELLED
    otherwise the least advanced line status
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.errors import Forbidden, InvalidStatus, NotFound
from storefront.order.events import (
    OrderLinesReassigned,
    OrderLineStatusChanged,
    OrderPlaced,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class LineStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Fulfillment progression; CANCELLED sits outside it
_PROGRESSION = {
    LineStatus.PENDING: 0,
    LineStatus.CONFIRMED: 1,
    LineStatus.SHIPPED: 2,
    LineStatus.DELIVERED: 3,
}


def aggregate_order_status(line_statuses) -> OrderStatus:
    """Derive the order status from the statuses of all its lines."""
    statuses = [LineStatus(s) for s in line_statuses]
    if not statuses:
        return OrderStatus.PENDING
    if LineStatus.CANCELLED in statuses:
        return OrderStatus.CANCELLED

    least_advanced = min(statuses, key=_PROGRESSION.__getitem__)
    return OrderStatus(least_advanced.value)


def assert_line_transition(current, target):
    """Raise ``InvalidStatus`` unless a seller may move a line from ``current`` to ``target``."""
    current, target = LineStatus(current), LineStatus(target)

    if current == LineStatus.CANCELLED:
        raise InvalidStatus({"status": ["A cancelled line cannot change status"]})
    if target == LineStatus.CANCELLED:
        return
    if target == LineStatus.PENDING:
        raise InvalidStatus({"status": ["A line cannot be moved back to PENDING"]})
    if _PROGRESSION[target] <= _PROGRESSION[current]:
        raise InvalidStatus({"status": [f"Cannot move a line from {current.value} to {target.value}"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderLine:
    """One purchased product variant, owned and fulfilled by a single seller."""

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)  # Unit price at placement
    color = String(max_length=100)
    size = String(max_length=100)
    status = String(choices=LineStatus, default=LineStatus.PENDING.value)
    source_line_item_id = Identifier()

    def to_dict(self):
        return {
            "line_id": str(self.id),
            "product_id": str(self.product_id),
            "seller_id": str(self.seller_id),
            "title": self.title,
            "quantity": self.quantity,
            "price": self.price,
            "color": self.color,
            "size": self.size,
            "status": self.status,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    address = String(required=True, max_length=1000)
    phone_number = String(required=True, max_length=50)
    payment = String(max_length=100)  # Label only
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    total = Float(default=0.0)
    idempotency_key = String(max_length=255)
    lines = HasMany(OrderLine)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, address, phone_number, payment, lines, idempotency_key=None):
        """Create an order from already priced ``OrderLine`` entities.

        The total is the sum of line price times quantity, rounded to cents.
        """
        now = datetime.now(UTC)
        total = round(sum(line.price * line.quantity for line in lines), 2)

        order = cls(
            user_id=user_id,
            address=address,
            phone_number=phone_number,
            payment=payment,
            status=OrderStatus.PENDING.value,
            total=total,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_lines(line)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                lines=json.dumps([line.to_dict() for line in order.lines]),
                line_count=len(order.lines),
                total=total,
                status=order.status,
                payment=payment,
                placed_at=now,
            )
        )
        return order

    def line(self, line_id):
        return next((line for line in self.lines if str(line.id) == str(line_id)), None)

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def set_line_status(self, line_id, seller_id, new_status) -> OrderStatus:
        """Move one line's fulfillment status and re-derive the order status.

        Only the seller owning the line may move it. Returns the order status
        after the change.
        """
        line = self.line(line_id)
        if line is None:
            raise NotFound({"line_id": [f"Order line {line_id} does not exist"]})
        if str(line.seller_id) != str(seller_id):
            raise Forbidden({"line_id": ["Only the seller owning this line can change its status"]})

        previous = LineStatus(line.status)
        try:
            target = LineStatus(new_status)
        except ValueError as exc:
            raise InvalidStatus({"status": [f"Unknown status {new_status}"]}) from exc
        assert_line_transition(previous, target)

        now = datetime.now(UTC)
        line.status = target.value
        self.updated_at = now

        self.raise_(
            OrderLineStatusChanged(
                order_id=str(self.id),
                line_id=str(line.id),
                seller_id=str(seller_id),
                previous_status=previous.value,
                new_status=target.value,
                changed_at=now,
            )
        )

        self.refresh_status(now)
        return OrderStatus(self.status)

    def refresh_status(self, now=None):
        """Recompute the order status by scanning every line."""
        derived = aggregate_order_status(line.status for line in self.lines)
        previous = OrderStatus(self.status)
        if derived == previous:
            return

        now = now or datetime.now(UTC)
        self.status = derived.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                user_id=str(self.user_id),
                previous_status=previous.value,
                new_status=derived.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Seller retirement
    # -------------------------------------------------------------------
    def reassign_seller(self, previous_seller_id, new_seller_id):
        """Hand every line owned by ``previous_seller_id`` to ``new_seller_id``."""
        moved = [line for line in self.lines if str(line.seller_id) == str(previous_seller_id)]
        if not moved:
            return []

        for line in moved:
            line.seller_id = new_seller_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderLinesReassigned(
                order_id=str(self.id),
                line_ids=json.dumps([str(line.id) for line in moved]),
                previous_seller_id=str(previous_seller_id),
                new_seller_id=str(new_seller_id),
            )
        )
        return moved
