"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.repository(part_of=Product)
class ProductRepository:
    def find(self, product_id) -> Product | None:
        """Return the product, or ``None`` when it does not exist."""
        if not product_id:
            return None
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            return None

    def owned_by(self, seller_id) -> list[Product]:
        return self._dao.query.filter(seller_id=str(seller_id)).all().items
