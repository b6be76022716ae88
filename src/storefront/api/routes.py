"""FastAPI routes for the Storefront — listings, cart lines, carts and orders.

The acting user arrives as the ``X-User-Id`` header on every request and is
passed explicitly into each command. Stock edits and seller retirement also
read the actor's role from ``X-User-Role``; request bodies never carry it.
"""

import json

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddLineItemRequest,
    CartCountResponse,
    LineItemResponse,
    ListProductRequest,
    MergeGuestCartRequest,
    MergeResultResponse,
    OrderIdResponse,
    OrderLineResponse,
    OrderResponse,
    OrderStatusResponse,
    OrderSummaryResponse,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductResponse,
    RetirementResponse,
    SellerOrderLineResponse,
    SetStockRequest,
    StatusResponse,
    StockResponse,
    UpdateLineQuantityRequest,
    UpdateLineStatusRequest,
    UpdateListingRequest,
)
from storefront.cart.items import AddLineItem, MoveToCart, RemoveLineItem, UpdateLineQuantity
from storefront.cart.merge import MergeGuestCart
from storefront.cart.reconciliation import ReconcileCart
from storefront.errors import Forbidden, NotFound
from storefront.line_item.line_item import LineItem, LineItemStatus
from storefront.order.fulfillment import UpdateLineFulfillmentStatus
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.product.listing import ListProduct, UpdateListing
from storefront.product.product import ActorRole, Product
from storefront.product.retirement import RetireSellerListings
from storefront.product.stock import SetStock, get_stock
from storefront.projections.order_summary import OrderSummary
from storefront.projections.seller_order_lines import SellerOrderLine

product_router = APIRouter(prefix="/products", tags=["products"])
seller_router = APIRouter(prefix="/sellers", tags=["sellers"])
line_item_router = APIRouter(prefix="/line-items", tags=["line-items"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _json_list(values):
    return json.dumps(values) if values is not None else None


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        seller_id=str(product.seller_id),
        title=product.title,
        price=product.price,
        stock=product.stock or 0,
        colors=product.color_options,
        sizes=product.size_options,
        images=product.image_urls,
        description=product.description,
        condition=product.condition,
        era=product.era,
    )


def _line_response(line) -> LineItemResponse:
    return LineItemResponse(
        line_item_id=str(line.id),
        user_id=str(line.user_id),
        product_id=str(line.product_id),
        color=line.color,
        size=line.size,
        quantity=line.quantity,
        status=line.status,
        price=line.price,
        image=line.image,
        created_at=line.created_at,
    )


def _load_line(line_item_id):
    return current_domain.repository_for(LineItem).get(line_item_id)


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def list_product(body: ListProductRequest, x_user_id: str = Header()) -> ProductIdResponse:
    command = ListProduct(
        seller_id=x_user_id,
        title=body.title,
        price=body.price,
        stock=body.stock,
        colors=json.dumps(body.colors),
        sizes=json.dumps(body.sizes),
        images=json.dumps(body.images),
        description=body.description,
        condition=body.condition,
        era=body.era,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).find(product_id)
    if product is None:
        raise NotFound({"product_id": [f"Product {product_id} does not exist"]})
    return _product_response(product)


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_listing(product_id: str, body: UpdateListingRequest, x_user_id: str = Header()) -> StatusResponse:
    command = UpdateListing(
        product_id=product_id,
        seller_id=x_user_id,
        title=body.title,
        price=body.price,
        stock=body.stock,
        colors=_json_list(body.colors),
        sizes=_json_list(body.sizes),
        images=_json_list(body.images),
        description=body.description,
        condition=body.condition,
        era=body.era,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.get("/{product_id}/stock", response_model=StockResponse)
async def read_stock(product_id: str) -> StockResponse:
    return StockResponse(product_id=product_id, stock=get_stock(product_id))


@product_router.put("/{product_id}/stock", response_model=StockResponse)
async def set_stock(
    product_id: str,
    body: SetStockRequest,
    x_user_id: str = Header(),
    x_user_role: str = Header(default=ActorRole.SELLER.value),
) -> StockResponse:
    command = SetStock(
        product_id=product_id,
        actor_id=x_user_id,
        actor_role=x_user_role,
        new_stock=body.stock,
    )
    stored = current_domain.process(command, asynchronous=False)
    return StockResponse(product_id=product_id, stock=stored)


# ---------------------------------------------------------------------------
# Seller Router
# ---------------------------------------------------------------------------
@seller_router.post("/{seller_id}/retirement", response_model=RetirementResponse)
async def retire_seller(
    seller_id: str,
    x_user_id: str = Header(),
    x_user_role: str = Header(default=ActorRole.SELLER.value),
) -> RetirementResponse:
    command = RetireSellerListings(seller_id=seller_id, actor_id=x_user_id, actor_role=x_user_role)
    result = current_domain.process(command, asynchronous=False)
    return RetirementResponse(**result)


@seller_router.get("/{seller_id}/order-lines", response_model=list[SellerOrderLineResponse])
async def seller_order_lines(seller_id: str, x_user_id: str = Header()) -> list[SellerOrderLineResponse]:
    if seller_id != x_user_id:
        raise Forbidden({"seller_id": ["Sellers can only view their own order lines"]})

    records = current_domain.repository_for(SellerOrderLine)._dao.query.filter(seller_id=seller_id).all().items
    return [
        SellerOrderLineResponse(
            line_id=str(r.line_id),
            order_id=str(r.order_id),
            buyer_id=str(r.buyer_id),
            product_id=str(r.product_id),
            title=r.title,
            quantity=r.quantity,
            price=r.price,
            color=r.color,
            size=r.size,
            status=r.status,
        )
        for r in sorted(records, key=lambda r: r.ordered_at, reverse=True)
    ]


# ---------------------------------------------------------------------------
# Line Item Router
# ---------------------------------------------------------------------------
@line_item_router.post("", status_code=201, response_model=LineItemResponse)
async def add_line_item(body: AddLineItemRequest, x_user_id: str = Header()) -> LineItemResponse:
    command = AddLineItem(
        user_id=x_user_id,
        product_id=body.product_id,
        color=body.color,
        size=body.size,
        quantity=body.quantity,
        status=body.status,
    )
    line_item_id = current_domain.process(command, asynchronous=False)
    return _line_response(_load_line(line_item_id))


@line_item_router.get("", response_model=list[LineItemResponse])
async def list_line_items(status: str = LineItemStatus.CART.value, x_user_id: str = Header()) -> list[LineItemResponse]:
    if status not in (LineItemStatus.CART.value, LineItemStatus.WISHLIST.value):
        raise NotFound({"status": [f"No {status} list exists"]})
    lines = current_domain.repository_for(LineItem).for_user(x_user_id, status)
    return [_line_response(line) for line in lines]


@line_item_router.put("/{line_item_id}", response_model=LineItemResponse)
async def update_line_quantity(
    line_item_id: str, body: UpdateLineQuantityRequest, x_user_id: str = Header()
) -> LineItemResponse:
    command = UpdateLineQuantity(
        user_id=x_user_id,
        line_item_id=line_item_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _line_response(_load_line(line_item_id))


@line_item_router.delete("/{line_item_id}", response_model=StatusResponse)
async def remove_line_item(line_item_id: str, x_user_id: str = Header()) -> StatusResponse:
    command = RemoveLineItem(user_id=x_user_id, line_item_id=line_item_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@line_item_router.post("/{line_item_id}/move-to-cart", response_model=LineItemResponse)
async def move_to_cart(line_item_id: str, x_user_id: str = Header()) -> LineItemResponse:
    command = MoveToCart(user_id=x_user_id, line_item_id=line_item_id)
    cart_line_id = current_domain.process(command, asynchronous=False)
    return _line_response(_load_line(cart_line_id))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
@cart_router.post("/merge", response_model=MergeResultResponse)
async def merge_guest_cart(body: MergeGuestCartRequest, x_user_id: str = Header()) -> MergeResultResponse:
    command = MergeGuestCart(
        user_id=x_user_id,
        lines=json.dumps([line.model_dump() for line in body.lines]),
    )
    result = current_domain.process(command, asynchronous=False)
    return MergeResultResponse(**result)


@cart_router.get("/count", response_model=CartCountResponse)
async def cart_count(x_user_id: str = Header()) -> CartCountResponse:
    count = current_domain.process(ReconcileCart(user_id=x_user_id), asynchronous=False)
    return CartCountResponse(count=count)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, x_user_id: str = Header()) -> OrderIdResponse:
    command = PlaceOrder(
        user_id=x_user_id,
        address=body.address,
        phone_number=body.phone_number,
        payment=body.payment,
        idempotency_key=body.idempotency_key,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_orders(x_user_id: str = Header()) -> list[OrderSummaryResponse]:
    summaries = current_domain.repository_for(OrderSummary)._dao.query.filter(user_id=x_user_id).all().items
    return [
        OrderSummaryResponse(
            order_id=str(s.order_id),
            status=s.status,
            line_count=s.line_count or 0,
            total=s.total or 0.0,
            created_at=s.created_at,
        )
        for s in sorted(summaries, key=lambda s: s.created_at, reverse=True)
    ]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, x_user_id: str = Header()) -> OrderResponse:
    order = current_domain.repository_for(Order).find(order_id)
    if order is None or str(order.user_id) != x_user_id:
        raise NotFound({"order_id": [f"Order {order_id} does not exist"]})

    return OrderResponse(
        order_id=str(order.id),
        user_id=str(order.user_id),
        address=order.address,
        phone_number=order.phone_number,
        payment=order.payment,
        status=order.status,
        total=order.total,
        created_at=order.created_at,
        lines=[OrderLineResponse(**line.to_dict()) for line in order.lines],
    )


@order_router.put("/{order_id}/lines/{line_id}/status", response_model=OrderStatusResponse)
async def update_line_status(
    order_id: str, line_id: str, body: UpdateLineStatusRequest, x_user_id: str = Header()
) -> OrderStatusResponse:
    command = UpdateLineFulfillmentStatus(
        order_id=order_id,
        line_id=line_id,
        seller_id=x_user_id,
        status=body.status,
    )
    order_status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=order_id, order_status=order_status)
