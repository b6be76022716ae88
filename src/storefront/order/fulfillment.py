"""Order line fulfillment — sellers move their own lines, the order status follows."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateLineFulfillmentStatus:
    """Set the fulfillment status of one order line."""

    order_id = Identifier(required=True)
    line_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(UpdateLineFulfillmentStatus)
    def update_line_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        if order is None:
            raise NotFound({"order_id": [f"Order {command.order_id} does not exist"]})

        previous = order.status
        order_status = order.set_line_status(command.line_id, command.seller_id, command.status)
        repo.add(order)

        logger.info(
            "Order line status updated",
            order_id=str(order.id),
            line_id=str(command.line_id),
            line_status=command.status,
            order_status=order_status.value,
            order_status_changed=previous != order_status.value,
        )
        return order_status.value
