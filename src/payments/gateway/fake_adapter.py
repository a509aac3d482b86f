"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
Intents it creates are remembered with their amount so verification can
report it back; it can be configured at runtime to decline payments.
"""

from decimal import Decimal
from uuid import uuid4

from payments.gateway.port import IntentResult, PaymentGateway, VerificationResult


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.intents: dict[str, tuple[Decimal, str]] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        idempotency_key: str,
    ) -> IntentResult:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount": amount,
                "currency": currency,
                "idempotency_key": idempotency_key,
            }
        )
        intent_id = f"fake_pi_{uuid4().hex[:12]}"
        self.intents[intent_id] = (amount, currency)
        return IntentResult(
            success=True,
            payment_intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
        )

    def verify_payment(self, payment_intent_id: str) -> VerificationResult:
        self.calls.append({"method": "verify_payment", "payment_intent_id": payment_intent_id})

        if payment_intent_id not in self.intents:
            return VerificationResult(success=False, gateway_status="not_found", failure_reason="Unknown payment intent")

        amount, currency = self.intents[payment_intent_id]
        if self.should_succeed:
            return VerificationResult(success=True, gateway_status="succeeded", amount=amount, currency=currency)
        return VerificationResult(
            success=False,
            gateway_status="failed",
            amount=amount,
            currency=currency,
            failure_reason=self.failure_reason,
        )
