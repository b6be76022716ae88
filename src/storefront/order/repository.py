"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order | None:
        if not order_id:
            return None
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            return None

    def for_user(self, user_id) -> list[Order]:
        """A buyer's orders, newest first."""
        orders = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def find_by_idempotency_key(self, user_id, idempotency_key) -> Order | None:
        if not idempotency_key:
            return None
        return next(
            iter(self._dao.query.filter(user_id=str(user_id), idempotency_key=idempotency_key).all().items),
            None,
        )

    def with_lines_from(self, seller_id) -> list[Order]:
        """Orders holding at least one line owned by ``seller_id``."""
        orders = self._dao.query.all().items
        return [order for order in orders if any(str(line.seller_id) == str(seller_id) for line in order.lines)]

    def remove(self, order: Order) -> None:
        self._dao.delete(order)
