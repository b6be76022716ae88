"""Tests for the Order aggregate — placement, line fulfillment and seller reassignment."""

import json

import pytest
from storefront.errors import Forbidden, InvalidStatus, NotFound
from storefront.order.events import OrderLinesReassigned, OrderLineStatusChanged, OrderPlaced, OrderStatusChanged
from storefront.order.order import LineStatus, Order, OrderLine, OrderStatus


def _line(seller_id="seller-001", price=10.0, quantity=1, product_id="prod-001"):
    return OrderLine(
        product_id=product_id,
        seller_id=seller_id,
        title="Vintage Lamp",
        quantity=quantity,
        price=price,
    )


def _place(*lines):
    return Order.place(
        user_id="buyer-001",
        address="12 Market Row, Leeds",
        phone_number="+44 113 496 0000",
        payment="Cash on delivery",
        lines=list(lines) or [_line()],
    )


class TestPlace:
    def test_place_sets_initial_state(self):
        order = _place(_line(), _line(product_id="prod-002"))
        assert order.status == OrderStatus.PENDING.value
        assert len(order.lines) == 2
        assert all(line.status == LineStatus.PENDING.value for line in order.lines)

    def test_total_is_sum_of_line_totals(self):
        order = _place(_line(price=12.0, quantity=2), _line(price=5.5, quantity=3))
        assert order.total == 40.5

    def test_total_is_rounded_to_cents(self):
        order = _place(_line(price=0.1, quantity=3))
        assert order.total == 0.3

    def test_place_raises_event_with_lines(self):
        order = _place(_line(), _line(seller_id="seller-002"))
        event = next(e for e in order._events if isinstance(e, OrderPlaced))
        lines = json.loads(event.lines)
        assert event.line_count == 2
        assert {line["seller_id"] for line in lines} == {"seller-001", "seller-002"}
        assert {line["line_id"] for line in lines} == {str(line.id) for line in order.lines}


class TestSetLineStatus:
    def test_owning_seller_moves_line(self):
        order = _place()
        line = order.lines[0]
        result = order.set_line_status(line.id, "seller-001", "SHIPPED")
        assert line.status == LineStatus.SHIPPED.value
        assert result == OrderStatus.SHIPPED

    def test_other_seller_is_forbidden(self):
        order = _place(_line(seller_id="seller-001"), _line(seller_id="seller-002"))
        line = order.lines[0]
        with pytest.raises(Forbidden):
            order.set_line_status(line.id, "seller-002", "CONFIRMED")
        assert line.status == LineStatus.PENDING.value

    def test_unknown_line_is_not_found(self):
        order = _place()
        with pytest.raises(NotFound):
            order.set_line_status("line-missing", "seller-001", "CONFIRMED")

    def test_unknown_status_is_invalid(self):
        order = _place()
        with pytest.raises(InvalidStatus):
            order.set_line_status(order.lines[0].id, "seller-001", "LOST")

    def test_line_status_event(self):
        order = _place()
        order.set_line_status(order.lines[0].id, "seller-001", "CONFIRMED")
        event = next(e for e in order._events if isinstance(e, OrderLineStatusChanged))
        assert event.previous_status == "PENDING"
        assert event.new_status == "CONFIRMED"

    def test_order_status_event_only_when_aggregate_moves(self):
        order = _place(_line(seller_id="seller-001"), _line(seller_id="seller-002"))
        order.set_line_status(order.lines[0].id, "seller-001", "SHIPPED")
        assert not [e for e in order._events if isinstance(e, OrderStatusChanged)]

        order.set_line_status(order.lines[1].id, "seller-002", "CONFIRMED")
        event = next(e for e in order._events if isinstance(e, OrderStatusChanged))
        assert event.previous_status == "PENDING"
        assert event.new_status == "CONFIRMED"

    def test_one_cancelled_line_cancels_the_order(self):
        order = _place(
            _line(seller_id="seller-001"),
            _line(seller_id="seller-002"),
            _line(seller_id="seller-003"),
        )
        order.set_line_status(order.lines[0].id, "seller-001", "DELIVERED")
        order.set_line_status(order.lines[1].id, "seller-002", "DELIVERED")
        result = order.set_line_status(order.lines[2].id, "seller-003", "CANCELLED")
        assert result == OrderStatus.CANCELLED
        assert order.status == OrderStatus.CANCELLED.value


class TestReassignSeller:
    def test_reassigns_only_that_sellers_lines(self):
        order = _place(_line(seller_id="seller-001"), _line(seller_id="seller-002"))
        moved = order.reassign_seller("seller-001", "retired-seller")
        assert len(moved) == 1
        assert {str(line.seller_id) for line in order.lines} == {"retired-seller", "seller-002"}

    def test_reassign_raises_event(self):
        order = _place()
        order.reassign_seller("seller-001", "retired-seller")
        event = next(e for e in order._events if isinstance(e, OrderLinesReassigned))
        assert json.loads(event.line_ids) == [str(order.lines[0].id)]

    def test_no_lines_no_event(self):
        order = _place()
        assert order.reassign_seller("seller-999", "retired-seller") == []
        assert not [e for e in order._events if isinstance(e, OrderLinesReassigned)]
