"""Repository for the LineItem aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.line_item.line_item import LineItem, LineItemStatus, LineKey


@storefront.repository(part_of=LineItem)
class LineItemRepository:
    """Lookups by owner, status and uniqueness key.

    Variant selectors are compared in Python since blank and missing
    selections are the same variant.
    """

    def find(self, line_item_id) -> LineItem | None:
        if not line_item_id:
            return None
        try:
            return self.get(line_item_id)
        except ObjectNotFoundError:
            return None

    def find_line(self, key: LineKey) -> LineItem | None:
        """Return the single line stored under ``key``, if any."""
        candidates = (
            self._dao.query.filter(
                user_id=key.user_id,
                product_id=key.product_id,
                status=key.status,
            )
            .all()
            .items
        )
        for line in candidates:
            if line.key == key:
                return line
        return None

    def upsert_quantity(self, key: LineKey, quantity, cap_fn, price, image=None) -> tuple[LineItem, bool]:
        """Merge ``quantity`` into the line under ``key``, or create it.

        ``cap_fn`` maps a proposed cart quantity to the quantity actually
        stored. Wishlist lines never accumulate: an existing one is returned
        untouched. Returns ``(line, created)``.
        """
        line = self.find_line(key)
        if line is None:
            stored = cap_fn(quantity) if key.status == LineItemStatus.CART.value else quantity
            line = LineItem.create(key, quantity=stored, price=price, image=image)
            self.add(line)
            return line, True

        if line.has_status(LineItemStatus.WISHLIST):
            return line, False

        line.change_quantity(cap_fn(line.quantity + quantity), reason="Merged")
        self.add(line)
        return line, False

    def for_user(self, user_id, status=LineItemStatus.CART.value) -> list[LineItem]:
        """All of a user's lines in ``status``, oldest first."""
        lines = self._dao.query.filter(user_id=str(user_id), status=LineItemStatus(status).value).all().items
        return sorted(lines, key=lambda line: (line.created_at is None, line.created_at))

    def remove(self, line: LineItem) -> None:
        self._dao.delete(line)
