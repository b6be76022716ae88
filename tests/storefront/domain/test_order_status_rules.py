"""Tests for order status derivation and line transition rules."""

import pytest
from storefront.errors import InvalidStatus
from storefront.order.order import OrderStatus, aggregate_order_status, assert_line_transition


class TestAggregateOrderStatus:
    @pytest.mark.parametrize(
        "line_statuses, expected",
        [
            (["CANCELLED", "CANCELLED"], OrderStatus.CANCELLED),
            (["DELIVERED", "DELIVERED"], OrderStatus.DELIVERED),
            (["SHIPPED", "SHIPPED"], OrderStatus.SHIPPED),
            (["CONFIRMED", "CONFIRMED"], OrderStatus.CONFIRMED),
            (["PENDING", "PENDING"], OrderStatus.PENDING),
            (["SHIPPED", "DELIVERED"], OrderStatus.SHIPPED),
            (["CONFIRMED", "DELIVERED"], OrderStatus.CONFIRMED),
            (["PENDING", "DELIVERED"], OrderStatus.PENDING),
            (["CANCELLED", "DELIVERED", "DELIVERED"], OrderStatus.CANCELLED),
            (["CANCELLED", "PENDING"], OrderStatus.CANCELLED),
        ],
    )
    def test_derivation(self, line_statuses, expected):
        assert aggregate_order_status(line_statuses) == expected

    def test_no_lines_is_pending(self):
        assert aggregate_order_status([]) == OrderStatus.PENDING


class TestLineTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            ("PENDING", "CONFIRMED"),
            ("PENDING", "SHIPPED"),
            ("PENDING", "DELIVERED"),
            ("CONFIRMED", "SHIPPED"),
            ("SHIPPED", "DELIVERED"),
            ("PENDING", "CANCELLED"),
            ("SHIPPED", "CANCELLED"),
            ("DELIVERED", "CANCELLED"),
        ],
    )
    def test_allowed(self, current, target):
        assert_line_transition(current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            ("CONFIRMED", "PENDING"),
            ("PENDING", "PENDING"),
            ("SHIPPED", "CONFIRMED"),
            ("DELIVERED", "SHIPPED"),
            ("SHIPPED", "SHIPPED"),
            ("CANCELLED", "DELIVERED"),
            ("CANCELLED", "CANCELLED"),
        ],
    )
    def test_rejected(self, current, target):
        with pytest.raises(InvalidStatus):
            assert_line_transition(current, target)
