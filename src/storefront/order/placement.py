"""Order placement — converts a user's cart into an order.

The cart snapshot is validated against live product data before anything is
written: every line's product must exist and have enough stock, and the total
is computed from current prices rather than the price recorded on the cart
line. The order is then stored and the source cart lines are marked
``ordered``. If any write fails partway, already-transitioned cart lines go
back to the cart and the partial order is deleted before the error surfaces.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ProteanException
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront import settings
from storefront.domain import storefront
from storefront.errors import EmptyCart, InvalidQuantity, OutOfStock, StorageFailure
from storefront.line_item.line_item import LineItem, LineItemStatus
from storefront.order.order import LineStatus, Order, OrderLine
from storefront.product.product import Product

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    address = String(required=True, max_length=1000)
    phone_number = String(required=True, max_length=50)
    payment = String(max_length=100)
    idempotency_key = String(max_length=255)


def _live_products(cart_lines):
    """Load the current product behind every cart line, checking stock."""
    repo = current_domain.repository_for(Product)
    products = {}
    for line in cart_lines:
        product_id = str(line.product_id)
        if product_id not in products:
            products[product_id] = repo.find(product_id)
        product = products[product_id]

        stock = product.stock if product is not None else 0
        if not stock:
            raise OutOfStock({"line_item_id": [f"Line {line.id} refers to a product that is out of stock"]})
        if line.quantity > stock:
            raise InvalidQuantity(
                {"line_item_id": [f"Line {line.id} asks for {line.quantity} but only {stock} are available"]}
            )
    return products


def _build_order_line(cart_line, product):
    """Snapshot a cart line and its live product into an order line."""
    return OrderLine(
        product_id=str(product.id),
        seller_id=str(product.seller_id),
        title=product.title,
        quantity=cart_line.quantity,
        price=product.price,
        color=cart_line.color,
        size=cart_line.size,
        status=LineStatus.PENDING.value,
        source_line_item_id=str(cart_line.id),
    )


def _compensate(order, ordered_lines):
    """Undo a partially applied placement."""
    line_repo = current_domain.repository_for(LineItem)
    for line in ordered_lines:
        line.restore_to_cart()
        line_repo.add(line)

    if order is not None:
        try:
            current_domain.repository_for(Order).remove(order)
        except ObjectNotFoundError:
            logger.info("Partial order was never stored", order_id=str(order.id))

    logger.warning(
        "Order placement rolled back",
        order_id=str(order.id) if order is not None else None,
        restored_lines=len(ordered_lines),
    )


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order_repo = current_domain.repository_for(Order)

        existing = order_repo.find_by_idempotency_key(command.user_id, command.idempotency_key)
        if existing is not None:
            logger.info(
                "Repeated checkout returned existing order",
                order_id=str(existing.id),
                user_id=str(command.user_id),
            )
            return str(existing.id)

        line_repo = current_domain.repository_for(LineItem)
        cart_lines = line_repo.for_user(command.user_id, LineItemStatus.CART.value)
        if not cart_lines:
            raise EmptyCart({"cart": ["Your cart is empty"]})

        products = _live_products(cart_lines)

        order = None
        ordered_lines = []
        try:
            order_lines = [_build_order_line(line, products[str(line.product_id)]) for line in cart_lines]
            order = Order.place(
                user_id=command.user_id,
                address=command.address,
                phone_number=command.phone_number,
                payment=command.payment,
                lines=order_lines,
                idempotency_key=command.idempotency_key,
            )
            order_repo.add(order)

            for line in cart_lines:
                line.mark_ordered(order.id)
                line_repo.add(line)
                ordered_lines.append(line)

            if settings.decrement_stock_on_order():
                product_repo = current_domain.repository_for(Product)
                for line in cart_lines:
                    product = products[str(line.product_id)]
                    product.consume_stock(line.quantity, reason=f"Order {order.id}")
                for product in products.values():
                    product_repo.add(product)
        except ProteanException:
            _compensate(order, ordered_lines)
            raise
        except Exception as exc:
            _compensate(order, ordered_lines)
            raise StorageFailure({"order": ["The order could not be stored. Please try again."]}) from exc

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            line_count=len(order.lines),
            total=order.total,
        )
        return str(order.id)
