"""Guest cart merge — folds a browser-held guest cart into a signed-in user's cart.

Each guest line goes through the same checks as a single add, so one bad
line (deleted product, sold out, malformed quantity) never blocks the rest.
All accepted lines are written in the handler's own unit of work.
Prices are taken from the live listing, not from the guest payload.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Text

from storefront.cart.items import add_line_item
from storefront.domain import storefront
from storefront.line_item.line_item import LineItem, LineItemStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="LineItem")
class MergeGuestCart:
    """Merge guest cart lines into ``user_id``'s cart."""

    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON array of {product_id, color, size, quantity, price, image}


def _load_guest_lines(raw):
    try:
        lines = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as exc:
        raise ValidationError({"lines": [f"Guest cart is not valid JSON: {exc.msg}"]}) from exc
    if not isinstance(lines, list):
        raise ValidationError({"lines": ["Guest cart must be a list of lines"]})
    return lines


@storefront.command_handler(part_of=LineItem)
class MergeGuestCartHandler:
    @handle(MergeGuestCart)
    def merge_guest_cart(self, command):
        guest_lines = _load_guest_lines(command.lines)

        merged = 0
        skipped = 0
        for guest_line in guest_lines:
            if not isinstance(guest_line, dict):
                skipped += 1
                logger.warning("Skipped malformed guest cart line", user_id=str(command.user_id))
                continue

            product_id = guest_line.get("product_id")
            try:
                add_line_item(
                    command.user_id,
                    product_id,
                    color=guest_line.get("color"),
                    size=guest_line.get("size"),
                    quantity=guest_line.get("quantity"),
                    status=LineItemStatus.CART.value,
                )
                merged += 1
            except (ObjectNotFoundError, ValidationError) as exc:
                skipped += 1
                logger.warning(
                    "Skipped guest cart line",
                    user_id=str(command.user_id),
                    product_id=product_id,
                    error=str(exc),
                )

        logger.info(
            "Guest cart merged",
            user_id=str(command.user_id),
            merged=merged,
            skipped=skipped,
        )
        return {"merged": merged, "skipped": skipped}
