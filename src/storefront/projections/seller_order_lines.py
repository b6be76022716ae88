"""Seller order lines — one record per order line, for the seller dashboard.

Carries both the order id and the line id, which is what a seller needs to
address a fulfillment status change.
"""

import json

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.events import OrderLinesReassigned, OrderLineStatusChanged, OrderPlaced
from storefront.order.order import Order


@storefront.projection
class SellerOrderLine:
    line_id = Identifier(identifier=True, required=True)
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    title = String()
    quantity = Integer(default=1)
    price = Float()
    color = String()
    size = String()
    status = String(required=True)
    ordered_at = DateTime()
    updated_at = DateTime()


@storefront.projector(projector_for=SellerOrderLine, aggregates=[Order])
class SellerOrderLineProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        repo = current_domain.repository_for(SellerOrderLine)
        lines = json.loads(event.lines) if isinstance(event.lines, str) else []
        for line in lines:
            repo.add(
                SellerOrderLine(
                    line_id=line["line_id"],
                    order_id=event.order_id,
                    seller_id=line["seller_id"],
                    buyer_id=event.user_id,
                    product_id=line["product_id"],
                    title=line.get("title"),
                    quantity=line["quantity"],
                    price=line["price"],
                    color=line.get("color"),
                    size=line.get("size"),
                    status=line["status"],
                    ordered_at=event.placed_at,
                    updated_at=event.placed_at,
                )
            )

    @on(OrderLineStatusChanged)
    def on_line_status_changed(self, event):
        repo = current_domain.repository_for(SellerOrderLine)
        record = repo.get(event.line_id)
        record.status = event.new_status
        record.updated_at = event.changed_at
        repo.add(record)

    @on(OrderLinesReassigned)
    def on_lines_reassigned(self, event):
        repo = current_domain.repository_for(SellerOrderLine)
        for line_id in json.loads(event.line_ids):
            record = repo.get(line_id)
            record.seller_id = event.new_seller_id
            repo.add(record)
