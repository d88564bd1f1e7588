"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from commerce.domain import commerce
from commerce.order.order import Order, OrderStatus


@commerce.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order | None:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            return None

    def find_by_account(self, account_id) -> list[Order]:
        """All orders for an account, newest first."""
        records = self._dao.query.filter(account_id=str(account_id)).all().items
        orders = [self.get(record.id) for record in records]
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    def find_pending(self) -> list[Order]:
        records = self._dao.query.filter(status=OrderStatus.PENDING.value).all().items
        return [self.get(record.id) for record in records]

    def remove(self, order: Order) -> None:
        self._dao.delete(order)
