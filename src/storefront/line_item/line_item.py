"""LineItem aggregate — one cart or wishlist entry for a user/product/variant.

For a given (user, product, color, size, status) key at most one line
exists; repeated adds merge into it. Price and image are snapshots taken when
the line was created. Checkout never trusts the price snapshot.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront
from storefront.line_item.events import (
    LineItemAdded,
    LineItemMovedToCart,
    LineItemOrdered,
    LineItemQuantityChanged,
    LineItemRestoredToCart,
)


class LineItemStatus(Enum):
    CART = "cart"
    WISHLIST = "wishlist"
    ORDERED = "ordered"


def normalize_variant(value):
    """Blank variant selectors mean "no selection"."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class LineKey:
    """Uniqueness key of a line item."""

    user_id: str
    product_id: str
    color: str | None
    size: str | None
    status: str

    @classmethod
    def of(cls, user_id, product_id, color, size, status):
        return cls(
            user_id=str(user_id),
            product_id=str(product_id),
            color=normalize_variant(color),
            size=normalize_variant(size),
            status=LineItemStatus(status).value,
        )


@storefront.aggregate
class LineItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(max_length=100)
    size = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    status = String(choices=LineItemStatus, default=LineItemStatus.CART.value)
    price = Float(default=0.0)  # Snapshot at add time
    image = String(max_length=500)  # Snapshot at add time
    order_id = Identifier()  # Set once the line is ordered
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, key, quantity, price, image=None):
        now = datetime.now(UTC)
        line = cls(
            user_id=key.user_id,
            product_id=key.product_id,
            color=key.color,
            size=key.size,
            quantity=quantity,
            status=key.status,
            price=price,
            image=image,
            created_at=now,
            updated_at=now,
        )
        line.raise_(
            LineItemAdded(
                line_item_id=str(line.id),
                user_id=key.user_id,
                product_id=key.product_id,
                color=key.color,
                size=key.size,
                quantity=quantity,
                status=key.status,
                price=price,
            )
        )
        return line

    @property
    def key(self):
        return LineKey.of(self.user_id, self.product_id, self.color, self.size, self.status)

    def is_owned_by(self, user_id):
        return str(self.user_id) == str(user_id)

    def has_status(self, status):
        return LineItemStatus(self.status) == status

    # -------------------------------------------------------------------
    # Quantity
    # -------------------------------------------------------------------
    def change_quantity(self, new_quantity, reason):
        """Set the quantity. Callers validate against stock first."""
        if not self.has_status(LineItemStatus.CART):
            raise ValidationError({"status": ["Only cart lines carry an editable quantity"]})
        if new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous_quantity = self.quantity
        if previous_quantity == new_quantity:
            return

        self.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            LineItemQuantityChanged(
                line_item_id=str(self.id),
                user_id=str(self.user_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def move_to_cart(self):
        """Flip a wishlist line into the cart, keeping its quantity as-is."""
        if not self.has_status(LineItemStatus.WISHLIST):
            raise ValidationError({"status": ["Only wishlist lines can be moved to the cart"]})

        self.status = LineItemStatus.CART.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            LineItemMovedToCart(
                line_item_id=str(self.id),
                user_id=str(self.user_id),
                quantity=self.quantity,
            )
        )

    def mark_ordered(self, order_id):
        """Take the line out of the active cart; it is kept for history."""
        if not self.has_status(LineItemStatus.CART):
            raise ValidationError({"status": ["Only cart lines can be ordered"]})

        self.status = LineItemStatus.ORDERED.value
        self.order_id = order_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            LineItemOrdered(
                line_item_id=str(self.id),
                user_id=str(self.user_id),
                order_id=str(order_id),
            )
        )

    def restore_to_cart(self):
        """Undo ``mark_ordered`` when the order could not be stored."""
        if not self.has_status(LineItemStatus.ORDERED):
            raise ValidationError({"status": ["Only ordered lines can be restored to the cart"]})

        order_id = str(self.order_id)
        self.status = LineItemStatus.CART.value
        self.order_id = None
        self.updated_at = datetime.now(UTC)

        self.raise_(
            LineItemRestoredToCart(
                line_item_id=str(self.id),
                user_id=str(self.user_id),
                order_id=order_id,
            )
        )
