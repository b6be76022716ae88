"""Listing management — commands and handler for creating and editing products."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import Forbidden, NotFound
from storefront.product.product import Product


def _load_list(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else list(value)


@storefront.command(part_of="Product")
class ListProduct:
    seller_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0)
    colors = Text()  # JSON array
    sizes = Text()  # JSON array
    images = Text()  # JSON array
    description = Text()
    condition = String(max_length=100)
    era = String(max_length=100)


@storefront.command(part_of="Product")
class UpdateListing:
    """Edit a listing. Omitted fields stay as they are; ``stock`` goes through the ledger clamp."""

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String(max_length=255)
    price = Float()
    stock = Integer()
    colors = Text()
    sizes = Text()
    images = Text()
    description = Text()
    condition = String(max_length=100)
    era = String(max_length=100)


@storefront.command_handler(part_of=Product)
class ManageListingHandler:
    @handle(ListProduct)
    def list_product(self, command):
        product = Product.list_new(
            seller_id=command.seller_id,
            title=command.title,
            price=command.price,
            stock=command.stock or 0,
            colors=_load_list(command.colors),
            sizes=_load_list(command.sizes),
            images=_load_list(command.images),
            description=command.description,
            condition=command.condition,
            era=command.era,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateListing)
    def update_listing(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.find(command.product_id)
        if product is None:
            raise NotFound({"product_id": [f"Product {command.product_id} does not exist"]})
        if not product.is_owned_by(command.seller_id):
            raise Forbidden({"product_id": ["Only the owning seller can edit this listing"]})

        product.update_listing(
            title=command.title,
            price=command.price,
            colors=_load_list(command.colors),
            sizes=_load_list(command.sizes),
            images=_load_list(command.images),
            description=command.description,
            condition=command.condition,
            era=command.era,
        )
        if command.stock is not None:
            product.set_stock(command.stock)
        repo.add(product)
