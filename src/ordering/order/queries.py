"""Order retrieval, always scoped to the owning user."""

from dataclasses import dataclass

from ordering.models import Order
from ordering.store.port import CheckoutStore
from shared.errors import OrderNotFoundError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class OrderPage:
    orders: list[Order]
    page: int
    limit: int
    total: int


class OrderQueries:
    def __init__(self, store: CheckoutStore) -> None:
        self.store = store

    def get_order(self, user_id: str, order_id: str) -> Order:
        with self.store.transaction(read_only=True) as tx:
            order = tx.find_order(order_id, user_id)
        if order is None:
            raise OrderNotFoundError()
        return order

    def list_orders(self, user_id: str, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> OrderPage:
        with self.store.transaction(read_only=True) as tx:
            orders = tx.list_orders(user_id, skip=(page - 1) * limit, take=limit)
            total = tx.count_orders(user_id)
        return OrderPage(orders=orders, page=page, limit=limit, total=total)
