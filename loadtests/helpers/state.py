"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own ids; nothing is shared across users.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """One simulated buyer's journey from listing to checkout."""

    buyer_id: str
    seller_id: str
    product_ids: list[str] = field(default_factory=list)
    line_item_ids: list[str] = field(default_factory=list)
    wishlist_line_id: str | None = None
    order_id: str | None = None


@dataclass
class SellerState:
    """A seller fulfilling the lines of an order."""

    seller_id: str
    order_id: str | None = None
    line_ids: list[str] = field(default_factory=list)
