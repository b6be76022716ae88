"""Product aggregate — a vintage listing and the authoritative stock count.

``stock`` is the single source of truth for availability. Cart and order
operations only read it to clamp or validate quantities; it changes through
seller/admin edits, seller retirement, and (when enabled in configuration)
order placement.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.product.events import ListingUpdated, ProductListed, ProductRetired, StockLevelSet


class ActorRole(Enum):
    SELLER = "Seller"
    ADMIN = "Admin"


def _encode_options(values):
    """Serialize a color/size collection as a sorted, de-duplicated JSON array."""
    cleaned = sorted({str(v).strip() for v in (values or []) if v is not None and str(v).strip()})
    return json.dumps(cleaned)


@storefront.aggregate
class Product:
    seller_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    colors = Text()  # JSON array of color names
    sizes = Text()  # JSON array of size labels
    images = Text()  # JSON array of image URLs, primary first
    condition = String(max_length=100)
    era = String(max_length=100)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def list_new(
        cls,
        seller_id,
        title,
        price,
        stock=0,
        colors=None,
        sizes=None,
        images=None,
        description=None,
        condition=None,
        era=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            seller_id=seller_id,
            title=title,
            description=description,
            price=round(float(price), 2),
            stock=max(int(stock or 0), 0),
            colors=_encode_options(colors),
            sizes=_encode_options(sizes),
            images=json.dumps(list(images or [])),
            condition=condition,
            era=era,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                seller_id=str(seller_id),
                title=title,
                price=product.price,
                stock=product.stock,
                listed_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def color_options(self):
        return json.loads(self.colors) if self.colors else []

    @property
    def size_options(self):
        return json.loads(self.sizes) if self.sizes else []

    @property
    def image_urls(self):
        return json.loads(self.images) if self.images else []

    @property
    def primary_image(self):
        urls = self.image_urls
        return urls[0] if urls else None

    def is_owned_by(self, seller_id):
        return str(self.seller_id) == str(seller_id)

    # -------------------------------------------------------------------
    # Listing edits
    # -------------------------------------------------------------------
    def update_listing(
        self,
        title=None,
        price=None,
        colors=None,
        sizes=None,
        images=None,
        description=None,
        condition=None,
        era=None,
    ):
        """Edit listing details. Fields passed as ``None`` are left unchanged."""
        previous_price = self.price

        if title is not None:
            if not title.strip():
                raise ValidationError({"title": ["Title cannot be blank"]})
            self.title = title
        if price is not None:
            if price < 0:
                raise ValidationError({"price": ["Price cannot be negative"]})
            self.price = round(float(price), 2)
        if colors is not None:
            self.colors = _encode_options(colors)
        if sizes is not None:
            self.sizes = _encode_options(sizes)
        if images is not None:
            self.images = json.dumps(list(images))
        if description is not None:
            self.description = description
        if condition is not None:
            self.condition = condition
        if era is not None:
            self.era = era

        self.updated_at = datetime.now(UTC)

        self.raise_(
            ListingUpdated(
                product_id=str(self.id),
                title=self.title,
                price=self.price,
                previous_price=previous_price,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def set_stock(self, new_stock, reason="Seller edit"):
        """Overwrite the stock count. Negative requests clamp to zero."""
        previous_stock = self.stock or 0
        self.stock = max(int(new_stock), 0)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockLevelSet(
                product_id=str(self.id),
                previous_stock=previous_stock,
                new_stock=self.stock,
                reason=reason,
            )
        )

    def consume_stock(self, quantity, reason):
        """Take ``quantity`` units out of stock, never going below zero."""
        self.set_stock((self.stock or 0) - quantity, reason=reason)

    # -------------------------------------------------------------------
    # Retirement
    # -------------------------------------------------------------------
    def retire(self, placeholder_owner_id):
        """Soft-disable the listing and hand it to a placeholder owner.

        Products are never hard-deleted because order lines keep referring
        to them.
        """
        previous_seller_id = str(self.seller_id)
        if self.stock:
            self.set_stock(0, reason="Seller retired")

        now = datetime.now(UTC)
        self.seller_id = placeholder_owner_id
        self.updated_at = now

        self.raise_(
            ProductRetired(
                product_id=str(self.id),
                previous_seller_id=previous_seller_id,
                new_seller_id=str(placeholder_owner_id),
                retired_at=now,
            )
        )
