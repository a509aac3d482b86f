"""Payment intents and verification for placed orders.

Gateway calls happen outside any database transaction; the order is read
before the call and updated with conditional statements after it.
"""

import structlog

from ordering.models import Order, OrderStatus, PaymentMethod, PaymentStatus
from ordering.order.lifecycle import predecessors_of
from ordering.pricing import to_money
from ordering.store.port import CheckoutStore
from payments.gateway.port import IntentResult, PaymentGateway
from shared.errors import (
    BusinessRuleError,
    InvalidStateTransitionError,
    OrderNotFoundError,
    PaymentVerificationError,
)

logger = structlog.get_logger(__name__)

_PAYABLE_STATUSES = {PaymentStatus.PENDING, PaymentStatus.FAILED}


class PaymentService:
    def __init__(self, store: CheckoutStore, gateway: PaymentGateway, currency: str = "INR") -> None:
        self.store = store
        self.gateway = gateway
        self.currency = currency

    def _payable_order(self, user_id: str, order_id: str) -> Order:
        with self.store.transaction(read_only=True) as tx:
            order = tx.find_order(order_id, user_id)
        if order is None:
            raise OrderNotFoundError()
        if order.payment_method == PaymentMethod.COD:
            raise BusinessRuleError("Cash on delivery orders are paid on delivery")
        if order.status == OrderStatus.CANCELLED:
            raise InvalidStateTransitionError(
                order.status.value, PaymentStatus.PAID.value, message="Cancelled orders cannot be paid"
            )
        if order.payment_status not in _PAYABLE_STATUSES:
            raise InvalidStateTransitionError(
                order.payment_status.value, PaymentStatus.PAID.value, message="Order is already paid"
            )
        return order

    def create_payment_intent(self, user_id: str, order_id: str) -> IntentResult:
        order = self._payable_order(user_id, order_id)

        result = self.gateway.create_payment_intent(
            amount=order.total,
            currency=self.currency,
            idempotency_key=order.order_number,
        )
        if not result.success:
            raise PaymentVerificationError(result.failure_reason or "Payment intent could not be created")

        with self.store.transaction() as tx:
            order = tx.find_order(order.id, user_id)
            tx.update_payment(
                order,
                PaymentStatus.PENDING,
                payment_intent_id=result.payment_intent_id,
                allowed_from=_PAYABLE_STATUSES,
            )

        logger.info("Payment intent created", order_id=order.id, payment_intent_id=result.payment_intent_id)
        return result

    def verify_payment(self, user_id: str, order_id: str, payment_intent_id: str) -> Order:
        order = self._payable_order(user_id, order_id)
        if order.payment_intent_id is None or order.payment_intent_id != payment_intent_id:
            logger.warning(
                "Payment intent does not belong to order",
                order_id=order.id,
                payment_intent_id=payment_intent_id,
                stored_intent_id=order.payment_intent_id,
            )
            raise PaymentVerificationError("Payment intent does not belong to this order")

        result = self.gateway.verify_payment(payment_intent_id)
        paid = result.success and result.amount is not None and to_money(result.amount) == order.total

        with self.store.transaction() as tx:
            order = tx.find_order(order.id, user_id)
            if not paid:
                tx.update_payment(
                    order, PaymentStatus.FAILED, payment_intent_id=payment_intent_id, allowed_from=_PAYABLE_STATUSES
                )
            elif not tx.update_payment(
                order, PaymentStatus.PAID, payment_intent_id=payment_intent_id, allowed_from=_PAYABLE_STATUSES
            ):
                raise InvalidStateTransitionError(
                    PaymentStatus.PAID.value, PaymentStatus.PAID.value, message="Order is already paid"
                )
            else:
                tx.transition_order_status(order, predecessors_of(OrderStatus.CONFIRMED), OrderStatus.CONFIRMED)

        if not paid:
            reason = result.failure_reason or "Paid amount does not match the order total"
            logger.warning(
                "Payment verification failed",
                order_id=order.id,
                payment_intent_id=payment_intent_id,
                gateway_status=result.gateway_status,
                reason=reason,
            )
            raise PaymentVerificationError(f"Payment verification failed: {reason}")

        logger.info("Payment verified", order_id=order.id, payment_intent_id=payment_intent_id)
        return order
