"""Inventory ledger — stock reads and seller/admin stock edits.

``get_stock`` is what every cart and order operation consults before
admitting a quantity. ``SetStock`` is the only command that overwrites stock
directly; it is accepted from the owning seller or from an admin.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import Forbidden, NotFound
from storefront.product.product import ActorRole, Product

logger = structlog.get_logger(__name__)


def get_stock(product_id) -> int:
    """Current stock for a product. Unknown products count as sold out."""
    product = current_domain.repository_for(Product).find(product_id)
    if product is None:
        return 0
    return product.stock or 0


def set_stock(product_id, new_stock, actor_id, actor_role=ActorRole.SELLER.value) -> int:
    """Overwrite a product's stock after checking who is asking.

    Returns the stored value, which is ``new_stock`` clamped to zero.
    """
    repo = current_domain.repository_for(Product)
    product = repo.find(product_id)
    if product is None:
        raise NotFound({"product_id": [f"Product {product_id} does not exist"]})

    if ActorRole(actor_role) != ActorRole.ADMIN and not product.is_owned_by(actor_id):
        raise Forbidden({"product_id": ["Only the owning seller or an admin can change stock"]})

    reason = "Admin edit" if ActorRole(actor_role) == ActorRole.ADMIN else "Seller edit"
    product.set_stock(new_stock, reason=reason)
    repo.add(product)

    logger.info(
        "Stock level set",
        product_id=str(product.id),
        requested=new_stock,
        stored=product.stock,
        actor_id=str(actor_id),
        actor_role=actor_role,
    )
    return product.stock


@storefront.command(part_of="Product")
class SetStock:
    """Overwrite a product's stock count."""

    product_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(choices=ActorRole, default=ActorRole.SELLER.value)
    new_stock = Integer(required=True)


@storefront.command_handler(part_of=Product)
class SetStockHandler:
    @handle(SetStock)
    def set_product_stock(self, command):
        return set_stock(
            product_id=command.product_id,
            new_stock=command.new_stock,
            actor_id=command.actor_id,
            actor_role=command.actor_role or ActorRole.SELLER.value,
        )
