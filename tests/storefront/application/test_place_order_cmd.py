"""Application tests for checkout: cart lines become an order."""

import pytest
from protean import current_domain
from storefront import settings
from storefront.cart.items import AddLineItem
from storefront.errors import EmptyCart, InvalidQuantity, OutOfStock, StorageFailure
from storefront.line_item.line_item import LineItem, LineItemStatus
from storefront.line_item.repository import LineItemRepository
from storefront.order import placement
from storefront.order.order import Order, OrderStatus
from storefront.order.placement import PlaceOrder
from storefront.product.listing import ListProduct, UpdateListing
from storefront.product.product import Product
from storefront.product.stock import SetStock

BUYER = "buyer-001"


def _list_product(stock=5, price=10.0, seller_id="seller-001"):
    return current_domain.process(
        ListProduct(seller_id=seller_id, title="Enamel Teapot", price=price, stock=stock),
        asynchronous=False,
    )


def _add(product_id, quantity=1, size=None):
    return current_domain.process(
        AddLineItem(user_id=BUYER, product_id=product_id, size=size, quantity=quantity),
        asynchronous=False,
    )


def _checkout(idempotency_key=None):
    return current_domain.process(
        PlaceOrder(
            user_id=BUYER,
            address="12 Market Street, Springfield",
            phone_number="+1-555-0100",
            payment="card",
            idempotency_key=idempotency_key,
        ),
        asynchronous=False,
    )


def _orders():
    return current_domain.repository_for(Order).for_user(BUYER)


def _lines(status):
    return current_domain.repository_for(LineItem).for_user(BUYER, status)


class TestPlaceOrder:
    def test_order_holds_every_cart_line(self):
        first = _list_product(price=10.0)
        second = _list_product(price=4.5)
        _add(first, quantity=2)
        _add(second, quantity=1)

        order = current_domain.repository_for(Order).get(_checkout())

        assert order.status == OrderStatus.PENDING.value
        assert len(order.lines) == 2
        assert order.total == 24.5

    def test_cart_lines_become_ordered(self):
        _add(_list_product(), quantity=2)
        order_id = _checkout()

        assert _lines(LineItemStatus.CART.value) == []
        ordered = _lines(LineItemStatus.ORDERED.value)
        assert len(ordered) == 1
        assert ordered[0].order_id == order_id

    def test_total_uses_live_price(self):
        product_id = _list_product(price=10.0)
        line_id = _add(product_id, quantity=2)
        current_domain.process(
            UpdateListing(product_id=product_id, seller_id="seller-001", price=12.0),
            asynchronous=False,
        )

        order = current_domain.repository_for(Order).get(_checkout())

        assert current_domain.repository_for(LineItem).get(line_id).price == 10.0
        assert order.lines[0].price == 12.0
        assert order.total == 24.0

    def test_order_line_records_current_seller(self):
        _add(_list_product(seller_id="seller-042"))
        order = current_domain.repository_for(Order).get(_checkout())
        assert order.lines[0].seller_id == "seller-042"

    def test_wishlist_lines_stay_behind(self):
        product_id = _list_product()
        _add(product_id)
        current_domain.process(
            AddLineItem(user_id=BUYER, product_id=product_id, size="XL", quantity=1, status="wishlist"),
            asynchronous=False,
        )

        order = current_domain.repository_for(Order).get(_checkout())

        assert len(order.lines) == 1
        assert len(_lines(LineItemStatus.WISHLIST.value)) == 1

    def test_stock_is_untouched_by_default(self):
        product_id = _list_product(stock=5)
        _add(product_id, quantity=2)
        _checkout()
        assert current_domain.repository_for(Product).get(product_id).stock == 5

    def test_stock_is_consumed_when_enabled(self, monkeypatch):
        monkeypatch.setattr(settings, "decrement_stock_on_order", lambda: True)
        product_id = _list_product(stock=5)
        _add(product_id, quantity=2, size="S")
        _add(product_id, quantity=1, size="M")

        _checkout()

        assert current_domain.repository_for(Product).get(product_id).stock == 2


class TestCheckoutRejections:
    def test_empty_cart(self):
        with pytest.raises(EmptyCart):
            _checkout()
        assert _orders() == []

    def test_sold_out_line(self):
        product_id = _list_product(stock=3)
        _add(product_id, quantity=1)
        current_domain.process(
            SetStock(product_id=product_id, actor_id="seller-001", new_stock=0),
            asynchronous=False,
        )

        with pytest.raises(OutOfStock):
            _checkout()
        assert _orders() == []
        assert len(_lines(LineItemStatus.CART.value)) == 1

    def test_line_above_current_stock(self):
        product_id = _list_product(stock=3)
        _add(product_id, quantity=3)
        current_domain.process(
            SetStock(product_id=product_id, actor_id="seller-001", new_stock=2),
            asynchronous=False,
        )

        with pytest.raises(InvalidQuantity):
            _checkout()
        assert _orders() == []
        assert _lines(LineItemStatus.CART.value)[0].quantity == 3


class TestCheckoutIdempotency:
    def test_same_key_returns_same_order(self):
        _add(_list_product())
        first = _checkout(idempotency_key="checkout-1")
        second = _checkout(idempotency_key="checkout-1")
        assert first == second
        assert len(_orders()) == 1

    def test_without_key_second_checkout_finds_empty_cart(self):
        _add(_list_product())
        _checkout()
        with pytest.raises(EmptyCart):
            _checkout()


class TestCheckoutFailureRollsBack:
    def test_failure_while_building_lines(self, monkeypatch):
        _add(_list_product())
        _add(_list_product())

        original = placement._build_order_line
        calls = []

        def flaky(cart_line, product):
            calls.append(cart_line.id)
            if len(calls) == 2:
                raise RuntimeError("snapshot failed")
            return original(cart_line, product)

        monkeypatch.setattr(placement, "_build_order_line", flaky)

        with pytest.raises(StorageFailure):
            _checkout()

        assert _orders() == []
        assert len(_lines(LineItemStatus.CART.value)) == 2
        assert _lines(LineItemStatus.ORDERED.value) == []

    def test_failure_while_marking_lines(self, monkeypatch):
        _add(_list_product())
        _add(_list_product())

        original = LineItemRepository.add
        calls = []

        def flaky(self, item):
            calls.append(item.id)
            if len(calls) == 2:
                raise RuntimeError("write failed")
            return original(self, item)

        monkeypatch.setattr(LineItemRepository, "add", flaky)

        with pytest.raises(StorageFailure):
            _checkout()

        monkeypatch.undo()
        assert _orders() == []
        assert len(_lines(LineItemStatus.CART.value)) == 2
        assert _lines(LineItemStatus.ORDERED.value) == []
        assert all(line.order_id is None for line in _lines(LineItemStatus.CART.value))
