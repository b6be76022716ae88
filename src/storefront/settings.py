"""Application settings read from the ``[custom]`` section of domain.toml."""

from protean.utils.globals import current_domain

DEFAULT_RETIRED_SELLER_ID = "retired-seller"


def _custom() -> dict:
    return current_domain.config.get("custom") or {}


def decrement_stock_on_order() -> bool:
    """Whether placing an order consumes product stock."""
    return bool(_custom().get("decrement_stock_on_order", False))


def retired_seller_id() -> str:
    """Placeholder owner that takes over listings of a retired seller."""
    return str(_custom().get("retired_seller_id") or DEFAULT_RETIRED_SELLER_ID)
