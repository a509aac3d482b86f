"""Stripe payment gateway adapter.

Uses the stripe-python SDK: a PaymentIntent is created per order (the order
number is the idempotency key) and verification retrieves it to read its
status and the amount actually received.
"""

from decimal import Decimal

import stripe
import structlog

from payments.gateway.port import IntentResult, PaymentGateway, VerificationResult

logger = structlog.get_logger(__name__)

# Currencies Stripe charges in whole units rather than cents
ZERO_DECIMAL_CURRENCIES = frozenset(
    {"BIF", "CLP", "DJF", "GNF", "JPY", "KMF", "KRW", "MGA", "PYG", "RWF", "UGX", "VND", "VUV", "XAF", "XOF", "XPF"}
)


def to_minor_units(amount: Decimal, currency: str) -> int:
    if currency.upper() in ZERO_DECIMAL_CURRENCIES:
        return int(amount)
    return int((amount * 100).to_integral_value())


def from_minor_units(amount: int, currency: str) -> Decimal:
    if currency.upper() in ZERO_DECIMAL_CURRENCIES:
        return Decimal(amount)
    return Decimal(amount) / 100


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        idempotency_key: str,
    ) -> IntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                amount=to_minor_units(amount, currency),
                currency=currency.lower(),
                metadata={"order_number": idempotency_key},
                automatic_payment_methods={"enabled": True},
                idempotency_key=idempotency_key,
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.warning("Stripe rejected payment intent", idempotency_key=idempotency_key, error=str(exc))
            return IntentResult(success=False, failure_reason=exc.user_message or "Payment intent could not be created")

        return IntentResult(success=True, payment_intent_id=intent.id, client_secret=intent.client_secret)

    def verify_payment(self, payment_intent_id: str) -> VerificationResult:
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self.api_key)
        except stripe.InvalidRequestError:
            return VerificationResult(success=False, gateway_status="not_found", failure_reason="Unknown payment intent")
        except stripe.StripeError as exc:
            logger.warning("Stripe lookup failed", payment_intent_id=payment_intent_id, error=str(exc))
            return VerificationResult(
                success=False, gateway_status="error", failure_reason="Payment could not be verified"
            )

        currency = intent.currency.upper()
        amount = from_minor_units(intent.amount_received or 0, currency)
        if intent.status == "succeeded":
            return VerificationResult(success=True, gateway_status=intent.status, amount=amount, currency=currency)

        error = intent.last_payment_error
        return VerificationResult(
            success=False,
            gateway_status=intent.status,
            amount=amount,
            currency=currency,
            failure_reason=(error.message if error else None) or f"Payment is {intent.status}",
        )
