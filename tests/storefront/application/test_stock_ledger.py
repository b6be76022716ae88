"""Application tests for stock reads and seller/admin stock edits."""

import pytest
from protean import current_domain
from storefront.errors import Forbidden, NotFound
from storefront.product.listing import ListProduct
from storefront.product.product import Product
from storefront.product.stock import SetStock, get_stock, set_stock


def _list_product(stock=3, seller_id="seller-001"):
    return current_domain.process(
        ListProduct(seller_id=seller_id, title="Leather Satchel", price=45.0, stock=stock),
        asynchronous=False,
    )


class TestGetStock:
    def test_returns_current_stock(self):
        product_id = _list_product(stock=4)
        assert get_stock(product_id) == 4

    def test_unknown_product_counts_as_sold_out(self):
        assert get_stock("prod-does-not-exist") == 0

    def test_missing_id_counts_as_sold_out(self):
        assert get_stock(None) == 0


class TestSetStockCommand:
    def test_owner_sets_stock(self):
        product_id = _list_product()
        stored = current_domain.process(
            SetStock(product_id=product_id, actor_id="seller-001", new_stock=9),
            asynchronous=False,
        )
        assert stored == 9
        assert current_domain.repository_for(Product).get(product_id).stock == 9

    def test_negative_request_clamps_to_zero(self):
        product_id = _list_product()
        stored = current_domain.process(
            SetStock(product_id=product_id, actor_id="seller-001", new_stock=-5),
            asynchronous=False,
        )
        assert stored == 0
        assert get_stock(product_id) == 0

    def test_admin_sets_stock_on_any_product(self):
        product_id = _list_product()
        stored = current_domain.process(
            SetStock(product_id=product_id, actor_id="admin-001", actor_role="Admin", new_stock=1),
            asynchronous=False,
        )
        assert stored == 1

    def test_other_seller_is_forbidden(self):
        product_id = _list_product()
        with pytest.raises(Forbidden):
            current_domain.process(
                SetStock(product_id=product_id, actor_id="seller-002", new_stock=10),
                asynchronous=False,
            )
        assert get_stock(product_id) == 3

    def test_unknown_product_is_not_found(self):
        with pytest.raises(NotFound):
            set_stock("prod-missing", 5, actor_id="seller-001")
