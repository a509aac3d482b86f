"""Application tests for payment intents and verification."""

from decimal import Decimal

import pytest
from ordering.models import OrderStatus, PaymentMethod, PaymentStatus
from ordering.order.queries import OrderQueries
from payments.verification import PaymentService
from shared.errors import (
    BusinessRuleError,
    InvalidStateTransitionError,
    OrderNotFoundError,
    PaymentVerificationError,
)


@pytest.fixture()
def payments(store, gateway):
    return PaymentService(store, gateway, currency="INR")


@pytest.fixture()
def card_order(shopper, make_product, make_order):
    return make_order(
        shopper,
        (make_product(price="500"), 1),
        status=OrderStatus.PENDING,
        payment_method=PaymentMethod.CARD,
    )


def _reload(store, order):
    return OrderQueries(store).get_order(order.user_id, order.id)


class TestCreatePaymentIntent:
    def test_intent_is_stored_on_the_order(self, store, gateway, payments, shopper, card_order):
        result = payments.create_payment_intent(shopper.id, card_order.id)

        assert result.success
        assert _reload(store, card_order).payment_intent_id == result.payment_intent_id
        assert gateway.calls[0]["amount"] == Decimal("640.00")
        assert gateway.calls[0]["currency"] == "INR"
        assert gateway.calls[0]["idempotency_key"] == card_order.order_number

    def test_cash_on_delivery_orders_are_rejected(self, payments, shopper, make_product, make_order):
        order = make_order(shopper, (make_product(), 1), payment_method=PaymentMethod.COD)

        with pytest.raises(BusinessRuleError):
            payments.create_payment_intent(shopper.id, order.id)

    def test_foreign_order(self, payments, make_user, card_order):
        with pytest.raises(OrderNotFoundError):
            payments.create_payment_intent(make_user().id, card_order.id)


class TestVerifyPayment:
    def test_success_marks_paid_and_confirms(self, store, payments, shopper, card_order):
        intent = payments.create_payment_intent(shopper.id, card_order.id)

        order = payments.verify_payment(shopper.id, card_order.id, intent.payment_intent_id)

        assert order.payment_status == PaymentStatus.PAID
        assert order.status == OrderStatus.CONFIRMED
        stored = _reload(store, card_order)
        assert (stored.payment_status, stored.status) == (PaymentStatus.PAID, OrderStatus.CONFIRMED)

    def test_declined_payment_is_recorded_as_failed(self, store, gateway, payments, shopper, card_order):
        intent = payments.create_payment_intent(shopper.id, card_order.id)
        gateway.configure(should_succeed=False, failure_reason="Card declined")

        with pytest.raises(PaymentVerificationError, match="Card declined"):
            payments.verify_payment(shopper.id, card_order.id, intent.payment_intent_id)

        stored = _reload(store, card_order)
        assert stored.payment_status == PaymentStatus.FAILED
        assert stored.status == OrderStatus.PENDING

    def test_amount_mismatch_fails(self, store, gateway, payments, shopper, card_order):
        intent = payments.create_payment_intent(shopper.id, card_order.id)
        gateway.intents[intent.payment_intent_id] = (Decimal("1.00"), "INR")

        with pytest.raises(PaymentVerificationError, match="does not match the order total"):
            payments.verify_payment(shopper.id, card_order.id, intent.payment_intent_id)

        assert _reload(store, card_order).payment_status == PaymentStatus.FAILED

    def test_failed_payment_can_be_retried(self, gateway, payments, shopper, card_order):
        intent = payments.create_payment_intent(shopper.id, card_order.id)
        gateway.configure(should_succeed=False)
        with pytest.raises(PaymentVerificationError):
            payments.verify_payment(shopper.id, card_order.id, intent.payment_intent_id)

        gateway.configure(should_succeed=True)
        order = payments.verify_payment(shopper.id, card_order.id, intent.payment_intent_id)

        assert order.payment_status == PaymentStatus.PAID

    def test_already_paid_order_cannot_be_verified_again(self, payments, shopper, card_order):
        intent = payments.create_payment_intent(shopper.id, card_order.id)
        payments.verify_payment(shopper.id, card_order.id, intent.payment_intent_id)

        with pytest.raises(InvalidStateTransitionError):
            payments.verify_payment(shopper.id, card_order.id, intent.payment_intent_id)

    def test_unknown_intent_fails(self, store, gateway, payments, shopper, card_order):
        intent = payments.create_payment_intent(shopper.id, card_order.id)
        del gateway.intents[intent.payment_intent_id]

        with pytest.raises(PaymentVerificationError, match="Unknown payment intent"):
            payments.verify_payment(shopper.id, card_order.id, intent.payment_intent_id)

        assert _reload(store, card_order).payment_status == PaymentStatus.FAILED


class TestIntentBinding:
    def test_order_without_an_intent_cannot_be_verified(self, store, gateway, payments, shopper, card_order):
        stray = gateway.create_payment_intent(Decimal("640.00"), "INR", "elsewhere")

        with pytest.raises(PaymentVerificationError, match="does not belong to this order"):
            payments.verify_payment(shopper.id, card_order.id, stray.payment_intent_id)

        assert _reload(store, card_order).payment_status == PaymentStatus.PENDING
        assert [call["method"] for call in gateway.calls] == ["create_payment_intent"]

    def test_paid_intent_cannot_settle_another_order(
        self, store, payments, shopper, make_product, make_order, card_order
    ):
        second = make_order(
            shopper,
            (make_product(price="500"), 1),
            status=OrderStatus.PENDING,
            payment_method=PaymentMethod.CARD,
        )
        first_intent = payments.create_payment_intent(shopper.id, card_order.id)
        payments.verify_payment(shopper.id, card_order.id, first_intent.payment_intent_id)
        payments.create_payment_intent(shopper.id, second.id)

        with pytest.raises(PaymentVerificationError, match="does not belong to this order"):
            payments.verify_payment(shopper.id, second.id, first_intent.payment_intent_id)

        stored = _reload(store, second)
        assert (stored.payment_status, stored.status) == (PaymentStatus.PENDING, OrderStatus.PENDING)
