"""Cart and wishlist line management — commands and handler.

Adds are optimistic: a cart quantity above stock is silently clamped.
Explicit quantity edits are strict: anything outside ``[1, stock]`` is
rejected with ``InvalidQuantity``.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import Forbidden, InvalidQuantity, NotFound, OutOfStock
from storefront.line_item.line_item import LineItem, LineItemStatus, LineKey
from storefront.product.product import Product
from storefront.product.stock import get_stock

logger = structlog.get_logger(__name__)


@storefront.command(part_of="LineItem")
class AddLineItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String(max_length=100)
    size = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    status = String(choices=LineItemStatus, default=LineItemStatus.CART.value)


@storefront.command(part_of="LineItem")
class UpdateLineQuantity:
    user_id = Identifier(required=True)
    line_item_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="LineItem")
class RemoveLineItem:
    user_id = Identifier(required=True)
    line_item_id = Identifier(required=True)


@storefront.command(part_of="LineItem")
class MoveToCart:
    user_id = Identifier(required=True)
    line_item_id = Identifier(required=True)


def _owned_line(repo, line_item_id, user_id):
    """Load a line the caller is allowed to touch.

    Ordered lines belong to order history and are not visible here.
    """
    line = repo.find(line_item_id)
    if line is None or line.has_status(LineItemStatus.ORDERED):
        raise NotFound({"line_item_id": [f"Line item {line_item_id} does not exist"]})
    if not line.is_owned_by(user_id):
        raise Forbidden({"line_item_id": ["This line item belongs to another user"]})
    return line


def _requested_quantity(value) -> int:
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        quantity = 0
    if quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be a whole number of at least 1"]})
    return quantity


def add_line_item(user_id, product_id, color=None, size=None, quantity=1, status=LineItemStatus.CART.value):
    """Add ``quantity`` of a product to a user's cart or wishlist.

    Every check runs before anything is written, so a rejected add leaves
    the repository untouched. Callers adding several lines in one unit of
    work can skip a rejected one and keep the rest. Returns the line.
    """
    status = LineItemStatus(status or LineItemStatus.CART.value)
    if status == LineItemStatus.ORDERED:
        raise ValidationError({"status": ["Lines can only be added to the cart or the wishlist"]})

    quantity = _requested_quantity(quantity)

    product = current_domain.repository_for(Product).find(product_id)
    if product is None:
        raise NotFound({"product_id": [f"Product {product_id} does not exist"]})

    stock = product.stock or 0
    if status == LineItemStatus.CART and stock == 0:
        raise OutOfStock({"product_id": [f"{product.title} is out of stock"]})

    if status == LineItemStatus.CART and quantity > stock:
        logger.info(
            "Clamped cart quantity to stock",
            product_id=str(product.id),
            requested=quantity,
            stock=stock,
        )
        quantity = stock

    key = LineKey.of(user_id, product.id, color, size, status.value)
    line, created = current_domain.repository_for(LineItem).upsert_quantity(
        key,
        quantity,
        cap_fn=lambda proposed: min(proposed, stock),
        price=product.price,
        image=product.primary_image,
    )

    logger.info(
        "Line item added" if created else "Line item merged",
        line_item_id=str(line.id),
        user_id=key.user_id,
        product_id=key.product_id,
        status=key.status,
        quantity=line.quantity,
    )
    return line


@storefront.command_handler(part_of=LineItem)
class ManageLineItemsHandler:
    @handle(AddLineItem)
    def add_line_item(self, command):
        line = add_line_item(
            command.user_id,
            command.product_id,
            color=command.color,
            size=command.size,
            quantity=command.quantity,
            status=command.status,
        )
        return str(line.id)

    @handle(UpdateLineQuantity)
    def update_line_quantity(self, command):
        repo = current_domain.repository_for(LineItem)
        line = _owned_line(repo, command.line_item_id, command.user_id)
        if not line.has_status(LineItemStatus.CART):
            raise NotFound({"line_item_id": [f"Line item {command.line_item_id} is not in the cart"]})

        stock = get_stock(line.product_id)
        if not 1 <= command.quantity <= stock:
            raise InvalidQuantity({"quantity": [f"Quantity must be between 1 and {stock}"]})

        line.change_quantity(command.quantity, reason="Buyer edit")
        repo.add(line)
        return str(line.id)

    @handle(RemoveLineItem)
    def remove_line_item(self, command):
        repo = current_domain.repository_for(LineItem)
        line = _owned_line(repo, command.line_item_id, command.user_id)
        repo.remove(line)

        logger.info("Line item removed", line_item_id=str(line.id), user_id=str(command.user_id))

    @handle(MoveToCart)
    def move_to_cart(self, command):
        repo = current_domain.repository_for(LineItem)
        line = repo.find(command.line_item_id)
        if line is None or not line.is_owned_by(command.user_id) or not line.has_status(LineItemStatus.WISHLIST):
            raise NotFound({"line_item_id": [f"Line item {command.line_item_id} is not in your wishlist"]})

        # A cart line for the same variant absorbs the wishlist line
        cart_key = LineKey.of(line.user_id, line.product_id, line.color, line.size, LineItemStatus.CART.value)
        existing = repo.find_line(cart_key)
        if existing is not None:
            existing.change_quantity(existing.quantity + line.quantity, reason="Moved from wishlist")
            repo.add(existing)
            repo.remove(line)
            return str(existing.id)

        line.move_to_cart()
        repo.add(line)
        return str(line.id)
