"""Checkout store port (abstract interface).

Defines the data-access contract the checkout core depends on: cart
snapshots, address lookup, order persistence and stock adjustments, all
performed through a ``StoreTransaction`` that commits or rolls back as one
unit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from ordering.pricing import LineItem

if TYPE_CHECKING:
    from identity.models import Address
    from ordering.models import Order, OrderItem, OrderStatus, PaymentStatus


@dataclass(frozen=True)
class ProductSnapshot:
    """Product state as read inside the current transaction."""

    id: str
    name: str
    price: Decimal
    sale_price: Decimal | None
    stock: int
    is_active: bool

    @property
    def unit_price(self) -> Decimal:
        return self.sale_price if self.sale_price is not None else self.price


@dataclass(frozen=True)
class CartLine:
    """One cart row joined with its product snapshot."""

    item_id: str
    product_id: str
    quantity: int
    product: ProductSnapshot

    @property
    def line_item(self) -> LineItem:
        return LineItem(unit_price=self.product.unit_price, quantity=self.quantity)

    @property
    def is_available(self) -> bool:
        return self.product.is_active and self.product.stock >= self.quantity


class StoreTransaction(ABC):
    """Operations available inside one atomic unit of work."""

    @abstractmethod
    def find_cart_items(self, user_id: str, lock: bool = False) -> list[CartLine]:
        """Load the user's cart lines; ``lock`` holds the product rows until commit."""
        ...

    @abstractmethod
    def find_address(self, address_id: str) -> Address | None: ...

    @abstractmethod
    def create_order(self, **fields) -> Order:
        """Insert an order with a freshly generated, unique order number."""
        ...

    @abstractmethod
    def create_order_item(
        self,
        order: Order,
        product_id: str,
        product_name: str,
        quantity: int,
        price: Decimal,
        total: Decimal,
    ) -> OrderItem: ...

    @abstractmethod
    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Take ``quantity`` units if at least that many remain; False otherwise."""
        ...

    @abstractmethod
    def increment_stock(self, product_id: str, quantity: int) -> None: ...

    @abstractmethod
    def delete_cart_items(self, user_id: str) -> int: ...

    @abstractmethod
    def find_order(self, order_id: str, user_id: str | None = None) -> Order | None:
        """Find an order, scoped to ``user_id`` when given."""
        ...

    @abstractmethod
    def list_orders(self, user_id: str, skip: int, take: int) -> list[Order]:
        """Orders newest first."""
        ...

    @abstractmethod
    def count_orders(self, user_id: str) -> int: ...

    @abstractmethod
    def transition_order_status(
        self,
        order: Order,
        allowed_from: set[OrderStatus],
        target: OrderStatus,
    ) -> bool:
        """Move ``order`` to ``target`` only if its stored status is in ``allowed_from``."""
        ...

    @abstractmethod
    def update_payment(
        self,
        order: Order,
        payment_status: PaymentStatus,
        payment_intent_id: str | None = None,
        allowed_from: set[PaymentStatus] | None = None,
    ) -> bool:
        """Record payment progress, only if the stored payment status is in ``allowed_from`` (any when None)."""
        ...


class CheckoutStore(ABC):
    """Factory for store transactions."""

    @abstractmethod
    def transaction(self, read_only: bool = False) -> AbstractContextManager[StoreTransaction]:
        """Open an atomic unit; any exception inside rolls back every effect.

        ``read_only`` units only look things up and never write.
        """
        ...
