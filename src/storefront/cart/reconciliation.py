"""Cart reconciliation — pull cart quantities back under current stock.

Run on every cart-count refresh, so it must stay cheap and safe to repeat.
Lines whose product has sold out are left alone (a line quantity is never
zero) and count for nothing until the stock returns or the buyer removes
them.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.line_item.line_item import LineItem, LineItemStatus
from storefront.product.stock import get_stock

logger = structlog.get_logger(__name__)


@storefront.command(part_of="LineItem")
class ReconcileCart:
    user_id = Identifier(required=True)


def reconcile_lines(lines, stock_of) -> tuple[int, list[LineItem]]:
    """Clamp each line to ``stock_of(product_id)`` and return the cart count.

    Also returns the lines whose quantity changed, for the caller to persist.
    """
    count = 0
    changed = []
    for line in lines:
        stock = stock_of(line.product_id)
        if stock <= 0:
            continue
        if line.quantity > stock:
            line.change_quantity(stock, reason="Stock reconciliation")
            changed.append(line)
        count += line.quantity
    return count, changed


@storefront.command_handler(part_of=LineItem)
class ReconcileCartHandler:
    @handle(ReconcileCart)
    def reconcile_cart(self, command):
        repo = current_domain.repository_for(LineItem)
        lines = repo.for_user(command.user_id, LineItemStatus.CART.value)

        count, changed = reconcile_lines(lines, get_stock)
        for line in changed:
            repo.add(line)

        if changed:
            logger.info(
                "Cart reconciled against stock",
                user_id=str(command.user_id),
                clamped_lines=len(changed),
                count=count,
            )
        return count
