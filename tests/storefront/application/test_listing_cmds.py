"""Application tests for creating and editing listings."""

import json

import pytest
from protean import current_domain
from storefront.errors import Forbidden, NotFound
from storefront.product.listing import ListProduct, UpdateListing
from storefront.product.product import Product


def _list_product(**overrides):
    defaults = {
        "seller_id": "seller-001",
        "title": "Art Deco Mirror",
        "price": 150.0,
        "stock": 1,
        "colors": json.dumps(["Gold"]),
        "images": json.dumps(["https://cdn.example.com/mirror.jpg"]),
        "era": "1930s",
    }
    defaults.update(overrides)
    return current_domain.process(ListProduct(**defaults), asynchronous=False)


class TestListProductCommand:
    def test_listing_persists(self):
        product_id = _list_product()
        product = current_domain.repository_for(Product).get(product_id)
        assert product.title == "Art Deco Mirror"
        assert product.color_options == ["Gold"]
        assert product.primary_image == "https://cdn.example.com/mirror.jpg"
        assert product.era == "1930s"

    def test_stock_defaults_to_zero(self):
        product_id = current_domain.process(
            ListProduct(seller_id="seller-001", title="Teak Side Table", price=70.0),
            asynchronous=False,
        )
        assert current_domain.repository_for(Product).get(product_id).stock == 0


class TestUpdateListingCommand:
    def test_owner_updates_price(self):
        product_id = _list_product()
        current_domain.process(
            UpdateListing(product_id=product_id, seller_id="seller-001", price=120.0),
            asynchronous=False,
        )
        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 120.0
        assert product.title == "Art Deco Mirror"

    def test_stock_edit_goes_through_clamp(self):
        product_id = _list_product()
        current_domain.process(
            UpdateListing(product_id=product_id, seller_id="seller-001", stock=-3),
            asynchronous=False,
        )
        assert current_domain.repository_for(Product).get(product_id).stock == 0

    def test_other_seller_is_forbidden(self):
        product_id = _list_product()
        with pytest.raises(Forbidden):
            current_domain.process(
                UpdateListing(product_id=product_id, seller_id="seller-002", price=1.0),
                asynchronous=False,
            )

    def test_unknown_product_is_not_found(self):
        with pytest.raises(NotFound):
            current_domain.process(
                UpdateListing(product_id="prod-missing", seller_id="seller-001", price=1.0),
                asynchronous=False,
            )
