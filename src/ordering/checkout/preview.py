"""Checkout preview: a priced, read-only projection of the user's cart."""

from dataclasses import dataclass
from decimal import Decimal

from ordering.models import PaymentMethod
from ordering.pricing import PriceBreakdown, price_lines
from ordering.store.port import CartLine, CheckoutStore
from shared.errors import EmptyCartError


@dataclass(frozen=True)
class PricedLine:
    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    stock: int
    is_active: bool
    is_available: bool


@dataclass(frozen=True)
class PricedCart:
    lines: list[PricedLine]
    total_items: int
    pricing: PriceBreakdown
    payment_method: PaymentMethod | None = None


def price_cart(lines: list[CartLine], payment_method: PaymentMethod | None = None) -> PricedCart:
    priced = [
        PricedLine(
            item_id=line.item_id,
            product_id=line.product_id,
            product_name=line.product.name,
            quantity=line.quantity,
            unit_price=line.product.unit_price,
            line_total=line.line_item.total,
            stock=line.product.stock,
            is_active=line.product.is_active,
            is_available=line.is_available,
        )
        for line in lines
    ]
    return PricedCart(
        lines=priced,
        total_items=sum(line.quantity for line in lines),
        pricing=price_lines(line.line_item for line in lines),
        payment_method=payment_method,
    )


class CheckoutPreviewService:
    def __init__(self, store: CheckoutStore) -> None:
        self.store = store

    def preview(self, user_id: str, payment_method: PaymentMethod | None = None) -> PricedCart:
        """Price the current cart without touching cart, stock or orders."""
        with self.store.transaction(read_only=True) as tx:
            lines = tx.find_cart_items(user_id)
        if not lines:
            raise EmptyCartError()
        return price_cart(lines, payment_method)
