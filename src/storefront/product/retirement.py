"""Seller retirement — what happens to a seller's footprint when their account goes away.

Listings are soft-disabled and handed to a placeholder owner, never deleted,
because placed orders keep pointing at them. Order lines move to the same
placeholder so the remaining fulfillment has an owner. The retiring user's
own cart and wishlist lines are dropped.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront import settings
from storefront.domain import storefront
from storefront.errors import Forbidden
from storefront.line_item.line_item import LineItem, LineItemStatus
from storefront.order.order import Order
from storefront.product.product import ActorRole, Product

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class RetireSellerListings:
    seller_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(choices=ActorRole, default=ActorRole.SELLER.value)


@storefront.command_handler(part_of=Product)
class RetireSellerHandler:
    @handle(RetireSellerListings)
    def retire_seller(self, command):
        placeholder = settings.retired_seller_id()
        seller_id = str(command.seller_id)
        if ActorRole(command.actor_role) != ActorRole.ADMIN and str(command.actor_id) != seller_id:
            raise Forbidden({"seller_id": ["Only the seller or an admin can retire these listings"]})

        product_repo = current_domain.repository_for(Product)
        products = product_repo.owned_by(seller_id)
        for product in products:
            product.retire(placeholder)
            product_repo.add(product)

        order_repo = current_domain.repository_for(Order)
        reassigned_lines = 0
        for order in order_repo.with_lines_from(seller_id):
            reassigned_lines += len(order.reassign_seller(seller_id, placeholder))
            order_repo.add(order)

        line_repo = current_domain.repository_for(LineItem)
        dropped_lines = 0
        for status in (LineItemStatus.CART, LineItemStatus.WISHLIST):
            for line in line_repo.for_user(seller_id, status.value):
                line_repo.remove(line)
                dropped_lines += 1

        logger.info(
            "Seller retired",
            seller_id=seller_id,
            actor_id=str(command.actor_id),
            placeholder=placeholder,
            products=len(products),
            order_lines=reassigned_lines,
            dropped_lines=dropped_lines,
        )
        return {
            "products": len(products),
            "order_lines": reassigned_lines,
            "dropped_lines": dropped_lines,
        }
