"""Order pricing: subtotal, shipping, tax and total for a set of line items.

All amounts are ``Decimal`` rounded half-up to two places. Shipping is free
from ``FREE_SHIPPING_THRESHOLD`` upward and a flat ``FLAT_SHIPPING_COST``
below it; tax is a flat ``TAX_RATE`` on the subtotal.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

FREE_SHIPPING_THRESHOLD = Decimal("999")
FLAT_SHIPPING_COST = Decimal("50")
TAX_RATE = Decimal("0.18")

_CENT = Decimal("0.01")


def to_money(amount: Decimal | int | str) -> Decimal:
    """Round an amount half-up to two decimal places."""
    return Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineItem:
    unit_price: Decimal
    quantity: int

    @property
    def total(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    total: Decimal


def shipping_for(subtotal: Decimal) -> Decimal:
    return to_money(0) if subtotal >= FREE_SHIPPING_THRESHOLD else to_money(FLAT_SHIPPING_COST)


def price_lines(lines: Iterable[LineItem]) -> PriceBreakdown:
    """Price a set of line items. Pure; an empty set prices to zero plus shipping."""
    subtotal = to_money(sum((line.total for line in lines), Decimal(0)))
    shipping_cost = shipping_for(subtotal)
    tax = to_money(subtotal * TAX_RATE)
    return PriceBreakdown(
        subtotal=subtotal,
        shipping_cost=shipping_cost,
        tax=tax,
        total=to_money(subtotal + shipping_cost + tax),
    )
