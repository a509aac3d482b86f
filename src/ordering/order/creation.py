"""Order creation: turns the user's cart into a placed order.

Everything happens in one store transaction: the cart is read with its
product rows locked, validated, priced, and then the order, its item
snapshots, the stock decrements and the cart deletion are written together.
Any failure leaves no trace.
"""

from dataclasses import dataclass

import structlog

from ordering.models import Order, OrderStatus, PaymentMethod, PaymentStatus
from ordering.pricing import price_lines
from ordering.store.port import CheckoutStore
from shared.errors import (
    EmptyCartError,
    InsufficientStockError,
    InvalidAddressError,
    ProductUnavailableError,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CreateOrder:
    user_id: str
    address_id: str
    payment_method: PaymentMethod
    payment_intent_id: str | None = None
    notes: str | None = None


def initial_status(payment_method: PaymentMethod) -> OrderStatus:
    """Cash on delivery needs no payment step, so it starts out confirmed."""
    match payment_method:
        case PaymentMethod.COD:
            return OrderStatus.CONFIRMED
        case PaymentMethod.CARD | PaymentMethod.UPI | PaymentMethod.NETBANKING:
            return OrderStatus.PENDING


class CreateOrderHandler:
    def __init__(self, store: CheckoutStore) -> None:
        self.store = store

    def create_order(self, command: CreateOrder) -> Order:
        with self.store.transaction() as tx:
            lines = tx.find_cart_items(command.user_id, lock=True)
            if not lines:
                raise EmptyCartError()

            address = tx.find_address(command.address_id)
            if address is None or address.user_id != command.user_id:
                raise InvalidAddressError(command.address_id)

            for line in lines:
                if not line.product.is_active:
                    raise ProductUnavailableError(line.product.name)
                if line.product.stock < line.quantity:
                    raise InsufficientStockError(line.product.name)

            pricing = price_lines(line.line_item for line in lines)

            order = tx.create_order(
                user_id=command.user_id,
                address_id=address.id,
                payment_method=command.payment_method,
                payment_status=PaymentStatus.PENDING,
                payment_intent_id=command.payment_intent_id,
                status=initial_status(command.payment_method),
                subtotal=pricing.subtotal,
                shipping_cost=pricing.shipping_cost,
                tax=pricing.tax,
                total=pricing.total,
                notes=command.notes or None,
            )

            for line in lines:
                tx.create_order_item(
                    order,
                    product_id=line.product_id,
                    product_name=line.product.name,
                    quantity=line.quantity,
                    price=line.product.unit_price,
                    total=line.line_item.total,
                )
                # Fails if a concurrent checkout took the stock first
                if not tx.decrement_stock(line.product_id, line.quantity):
                    raise InsufficientStockError(line.product.name)

            tx.delete_cart_items(command.user_id)

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            user_id=command.user_id,
            item_count=len(order.items),
            total=str(order.total),
        )
        return order
