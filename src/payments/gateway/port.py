"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class IntentResult:
    """Result of creating a payment intent."""

    success: bool
    payment_intent_id: str | None = None
    client_secret: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class VerificationResult:
    """What the gateway reports about a payment intent."""

    success: bool
    gateway_status: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        idempotency_key: str,
    ) -> IntentResult:
        """Create a payment intent the client completes with the gateway."""
        ...

    @abstractmethod
    def verify_payment(self, payment_intent_id: str) -> VerificationResult:
        """Ask the gateway whether the intent was paid, and for how much."""
        ...
