"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the internal Protean
commands. Bodies are validated here before any command is built.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Product Schemas
# ---------------------------------------------------------------------------
class ListProductRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)
    stock: int = Field(ge=0, default=0)
    colors: list[str] = []
    sizes: list[str] = []
    images: list[str] = []
    description: str | None = None
    condition: str | None = None
    era: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "1970s Suede Fringe Jacket",
                    "price": 120.0,
                    "stock": 2,
                    "colors": ["Tan"],
                    "sizes": ["M", "L"],
                    "images": ["https://cdn.example.com/jacket.jpg"],
                    "condition": "Very good",
                    "era": "1970s",
                }
            ]
        }
    }


class UpdateListingRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    price: float | None = Field(default=None, ge=0)
    stock: int | None = None
    colors: list[str] | None = None
    sizes: list[str] | None = None
    images: list[str] | None = None
    description: str | None = None
    condition: str | None = None
    era: str | None = None


class SetStockRequest(BaseModel):
    stock: int


class ProductResponse(BaseModel):
    product_id: str
    seller_id: str
    title: str
    price: float
    stock: int
    colors: list[str]
    sizes: list[str]
    images: list[str]
    description: str | None = None
    condition: str | None = None
    era: str | None = None


class ProductIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "b2c3d4e5-f6a7-8901-bcde-f12345678901"}]}}

    product_id: str


class StockResponse(BaseModel):
    product_id: str
    stock: int


class RetirementResponse(BaseModel):
    products: int
    order_lines: int
    dropped_lines: int


# ---------------------------------------------------------------------------
# Line Item Schemas
# ---------------------------------------------------------------------------
class AddLineItemRequest(BaseModel):
    product_id: str
    color: str | None = None
    size: str | None = None
    quantity: int = Field(ge=1, default=1)
    status: str = Field(default="cart", pattern="^(cart|wishlist)$")


class UpdateLineQuantityRequest(BaseModel):
    quantity: int


class LineItemResponse(BaseModel):
    line_item_id: str
    user_id: str
    product_id: str
    color: str | None = None
    size: str | None = None
    quantity: int
    status: str
    price: float
    image: str | None = None
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class GuestLineSchema(BaseModel):
    product_id: str
    color: str | None = None
    size: str | None = None
    quantity: int = 1
    price: float | None = None
    image: str | None = None


class MergeGuestCartRequest(BaseModel):
    lines: list[GuestLineSchema]


class MergeResultResponse(BaseModel):
    merged: int
    skipped: int


class CartCountResponse(BaseModel):
    count: int


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    address: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    payment: str | None = None
    idempotency_key: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "address": "12 Market Row, Leeds LS1 6DT",
                    "phone_number": "+44 113 496 0000",
                    "payment": "Cash on delivery",
                    "idempotency_key": "checkout-7f1c",
                }
            ]
        }
    }


class UpdateLineStatusRequest(BaseModel):
    status: str


class OrderIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"order_id": "d4e5f6a7-b8c9-0123-def0-234567890123"}]}}

    order_id: str


class OrderStatusResponse(BaseModel):
    order_id: str
    order_status: str


class OrderLineResponse(BaseModel):
    line_id: str
    product_id: str
    seller_id: str
    title: str | None = None
    quantity: int
    price: float
    color: str | None = None
    size: str | None = None
    status: str


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    address: str
    phone_number: str
    payment: str | None = None
    status: str
    total: float
    created_at: datetime | None = None
    lines: list[OrderLineResponse]


class OrderSummaryResponse(BaseModel):
    order_id: str
    status: str
    line_count: int
    total: float
    created_at: datetime | None = None


class SellerOrderLineResponse(BaseModel):
    line_id: str
    order_id: str
    buyer_id: str
    product_id: str
    title: str | None = None
    quantity: int
    price: float
    color: str | None = None
    size: str | None = None
    status: str


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
