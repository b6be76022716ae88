"""BDD tests for per-seller line fulfillment and the derived order status."""

from protean import current_domain
from protean.exceptions import InvalidOperationError
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.cart.items import AddLineItem
from storefront.errors import Forbidden
from storefront.order.fulfillment import UpdateLineFulfillmentStatus
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.product.listing import ListProduct

scenarios("features/fulfillment.feature")


def _line_of(shop, seller_id):
    order = current_domain.repository_for(Order).get(shop["order_id"])
    return next(line for line in order.lines if line.seller_id == seller_id)


def _move(shop, line, seller_id, status):
    current_domain.process(
        UpdateLineFulfillmentStatus(order_id=shop["order_id"], line_id=line.id, seller_id=seller_id, status=status),
        asynchronous=False,
    )


@given(parsers.cfparse('an order with lines from "{first}" and "{second}"'))
def order_with_two_sellers(shop, buyer_id, first, second):
    for seller_id in (first, second):
        product_id = current_domain.process(
            ListProduct(seller_id=seller_id, title=f"Lamp by {seller_id}", price=22.0, stock=2),
            asynchronous=False,
        )
        current_domain.process(
            AddLineItem(user_id=buyer_id, product_id=product_id, quantity=1),
            asynchronous=False,
        )
    shop["order_id"] = current_domain.process(
        PlaceOrder(user_id=buyer_id, address="3 Mill Lane", phone_number="555-0177"),
        asynchronous=False,
    )


@when(parsers.cfparse('"{seller_id}" marks their line {status}'))
def mark_own_line(shop, seller_id, status):
    _move(shop, _line_of(shop, seller_id), seller_id, status)


@when(parsers.cfparse('"{seller_id}" tries to mark the line of "{owner_id}" {status}'))
def mark_foreign_line(shop, seller_id, owner_id, status):
    try:
        _move(shop, _line_of(shop, owner_id), seller_id, status)
    except InvalidOperationError as exc:
        shop["error"] = exc


@then(parsers.cfparse("the order status is {status}"))
def order_status_is(shop, status):
    assert current_domain.repository_for(Order).get(shop["order_id"]).status == status


@then("the change is forbidden")
def change_forbidden(shop):
    assert isinstance(shop["error"], Forbidden)
