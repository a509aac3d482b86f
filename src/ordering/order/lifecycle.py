"""Order lifecycle: status transitions and cancellation with stock restore.

State Machine:
    PENDING → CONFIRMED → SHIPPED → DELIVERED
    PENDING | CONFIRMED → CANCELLED
"""

from dataclasses import dataclass

import structlog

from ordering.models import Order, OrderStatus
from ordering.store.port import CheckoutStore
from shared.errors import InvalidStateTransitionError, OrderNotFoundError

logger = structlog.get_logger(__name__)

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States from which cancellation is allowed
CANCELLABLE_STATES = {status for status, targets in _VALID_TRANSITIONS.items() if OrderStatus.CANCELLED in targets}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS[current]


def assert_can_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not can_transition(current, target):
        raise InvalidStateTransitionError(current.value, target.value)


def predecessors_of(target: OrderStatus) -> set[OrderStatus]:
    """States from which ``target`` is directly reachable."""
    return {status for status, targets in _VALID_TRANSITIONS.items() if target in targets}


@dataclass(frozen=True)
class CancelOrder:
    user_id: str
    order_id: str


@dataclass(frozen=True)
class AdvanceOrder:
    order_id: str
    target: OrderStatus


class OrderLifecycleHandler:
    def __init__(self, store: CheckoutStore) -> None:
        self.store = store

    def cancel_order(self, command: CancelOrder) -> Order:
        """Cancel an order and put its quantities back on the shelf.

        The status change is conditional on the stored status still being
        cancellable, so two racing cancellations restore stock once.
        """
        with self.store.transaction() as tx:
            order = tx.find_order(command.order_id, command.user_id)
            if order is None:
                raise OrderNotFoundError()

            if order.status not in CANCELLABLE_STATES:
                raise InvalidStateTransitionError(
                    order.status.value,
                    OrderStatus.CANCELLED.value,
                    message="Order cannot be cancelled",
                )

            if not tx.transition_order_status(order, CANCELLABLE_STATES, OrderStatus.CANCELLED):
                raise InvalidStateTransitionError(
                    order.status.value,
                    OrderStatus.CANCELLED.value,
                    message="Order cannot be cancelled",
                )

            for item in order.items:
                tx.increment_stock(item.product_id, item.quantity)

        logger.info(
            "Order cancelled",
            order_id=order.id,
            order_number=order.order_number,
            user_id=command.user_id,
            restored_items=len(order.items),
        )
        return order

    def advance_order(self, command: AdvanceOrder) -> Order:
        """Move an order forward along the fulfilment path (admin only).

        Cancellation is excluded here; it must go through ``cancel_order`` so
        stock is restored.
        """
        if command.target in (OrderStatus.CANCELLED, OrderStatus.PENDING):
            raise InvalidStateTransitionError(
                "*",
                command.target.value,
                message=f"Orders cannot be moved to {command.target.value} directly",
            )

        with self.store.transaction() as tx:
            order = tx.find_order(command.order_id)
            if order is None:
                raise OrderNotFoundError()

            previous = order.status
            assert_can_transition(previous, command.target)
            if not tx.transition_order_status(order, predecessors_of(command.target), command.target):
                raise InvalidStateTransitionError(previous.value, command.target.value)

        logger.info(
            "Order status updated",
            order_id=order.id,
            from_status=previous.value,
            to_status=command.target.value,
        )
        return order
