"""Application tests for order creation: atomic cart-to-order conversion."""

from decimal import Decimal

import pytest
from ordering.models import CartItem, Order, OrderItem, OrderStatus, PaymentMethod, PaymentStatus
from ordering.order.creation import CreateOrder, CreateOrderHandler
from ordering.store import SqlAlchemyStore
from ordering.store.sqlalchemy_adapter import SqlAlchemyTransaction
from shared.errors import (
    EmptyCartError,
    InsufficientStockError,
    InvalidAddressError,
    PersistenceError,
    ProductUnavailableError,
)
from sqlalchemy import func, select


def _create(store, user, address, method=PaymentMethod.COD, **kwargs):
    return CreateOrderHandler(store).create_order(
        CreateOrder(user_id=user.id, address_id=address.id, payment_method=method, **kwargs)
    )


def _count(database, model, *filters):
    with database.transaction() as session:
        return session.scalar(select(func.count()).select_from(model).where(*filters))


class TestCreateOrder:
    def test_cod_order_is_confirmed_and_priced(self, store, shopper, shipping_address, make_product, fill_cart):
        product = make_product(price="500", stock=5)
        fill_cart(shopper, (product, 2))

        order = _create(store, shopper, shipping_address, notes="Ring the bell")

        assert order.status == OrderStatus.CONFIRMED
        assert order.payment_status == PaymentStatus.PENDING
        assert order.order_number.startswith("ORD")
        assert order.subtotal == Decimal("1000.00")
        assert order.shipping_cost == Decimal("0.00")
        assert order.tax == Decimal("180.00")
        assert order.total == Decimal("1180.00")
        assert order.notes == "Ring the bell"
        assert order.address_id == shipping_address.id

    def test_prepaid_order_starts_pending(self, store, shopper, shipping_address, make_product, fill_cart):
        fill_cart(shopper, (make_product(price="200"), 1))

        order = _create(store, shopper, shipping_address, method=PaymentMethod.UPI, payment_intent_id="pi_123")

        assert order.status == OrderStatus.PENDING
        assert order.payment_intent_id == "pi_123"

    def test_items_snapshot_prices_and_sum_to_subtotal(
        self, store, shopper, shipping_address, make_product, fill_cart
    ):
        kurta = make_product(name="Cotton Kurta", price="1299", sale_price="999", stock=3)
        sandals = make_product(name="Leather Sandals", price="799", stock=3)
        fill_cart(shopper, (kurta, 1), (sandals, 2))

        order = _create(store, shopper, shipping_address)

        assert [(item.product_name, item.quantity, item.price, item.total) for item in order.items] == [
            ("Cotton Kurta", 1, Decimal("999"), Decimal("999.00")),
            ("Leather Sandals", 2, Decimal("799"), Decimal("1598.00")),
        ]
        assert sum(item.total for item in order.items) == order.subtotal

    def test_stock_decremented_and_cart_cleared(
        self, database, store, shopper, shipping_address, make_product, fill_cart, stock_of
    ):
        product = make_product(stock=5)
        fill_cart(shopper, (product, 2))

        _create(store, shopper, shipping_address)

        assert stock_of(product.id) == 3
        assert _count(database, CartItem, CartItem.user_id == shopper.id) == 0

    def test_order_is_durable(self, database, store, shopper, shipping_address, make_product, fill_cart):
        fill_cart(shopper, (make_product(), 1))

        order = _create(store, shopper, shipping_address)

        assert _count(database, Order, Order.id == order.id) == 1
        assert _count(database, OrderItem, OrderItem.order_id == order.id) == 1


class TestCreateOrderRejections:
    def test_empty_cart(self, store, shopper, shipping_address):
        with pytest.raises(EmptyCartError):
            _create(store, shopper, shipping_address)

    def test_foreign_address(self, store, shopper, make_user, make_address, make_product, fill_cart):
        stranger_address = make_address(make_user())
        fill_cart(shopper, (make_product(), 1))

        with pytest.raises(InvalidAddressError):
            _create(store, shopper, stranger_address)

    def test_unknown_address_is_not_replaced_by_a_placeholder(
        self, database, store, shopper, make_product, fill_cart
    ):
        fill_cart(shopper, (make_product(), 1))

        with pytest.raises(InvalidAddressError):
            CreateOrderHandler(store).create_order(
                CreateOrder(user_id=shopper.id, address_id="missing", payment_method=PaymentMethod.COD)
            )
        assert _count(database, Order) == 0

    def test_inactive_product(self, store, shopper, shipping_address, make_product, fill_cart):
        fill_cart(shopper, (make_product(name="Retired Lamp", is_active=False), 1))

        with pytest.raises(ProductUnavailableError, match="Product Retired Lamp is no longer available"):
            _create(store, shopper, shipping_address)

    def test_insufficient_stock_leaves_everything_untouched(
        self, database, store, shopper, shipping_address, make_product, fill_cart, stock_of
    ):
        plenty = make_product(name="Brass Diya", stock=10)
        scarce = make_product(name="Silk Saree", stock=2)
        fill_cart(shopper, (plenty, 1), (scarce, 3))

        with pytest.raises(InsufficientStockError, match="Insufficient stock for Silk Saree"):
            _create(store, shopper, shipping_address)

        assert stock_of(plenty.id) == 10
        assert stock_of(scarce.id) == 2
        assert _count(database, CartItem, CartItem.user_id == shopper.id) == 2
        assert _count(database, Order) == 0

    def test_lost_conditional_decrement_rolls_back(
        self, database, store, shopper, shipping_address, make_product, fill_cart, stock_of, monkeypatch
    ):
        first = make_product(name="First", stock=5)
        second = make_product(name="Second", stock=5)
        fill_cart(shopper, (first, 1), (second, 1))

        decrement = SqlAlchemyTransaction.decrement_stock

        def decrement_stock(self, product_id, quantity):
            # Another checkout took the stock after validation
            if product_id == second.id:
                return False
            return decrement(self, product_id, quantity)

        monkeypatch.setattr(SqlAlchemyTransaction, "decrement_stock", decrement_stock)

        with pytest.raises(InsufficientStockError, match="Second"):
            _create(store, shopper, shipping_address)

        assert stock_of(first.id) == 5
        assert _count(database, Order) == 0
        assert _count(database, CartItem, CartItem.user_id == shopper.id) == 2


class TestOrderNumberCollisions:
    def test_colliding_number_is_regenerated(self, database, shopper, shipping_address, make_product, fill_cart):
        numbers = iter(["ORD-FIXED", "ORD-FIXED", "ORD-FRESH"])
        store = SqlAlchemyStore(database, number_factory=lambda: next(numbers))
        product = make_product(stock=5)

        fill_cart(shopper, (product, 1))
        first = _create(store, shopper, shipping_address)
        fill_cart(shopper, (product, 1))
        second = _create(store, shopper, shipping_address)

        assert first.order_number == "ORD-FIXED"
        assert second.order_number == "ORD-FRESH"

    def test_exhausted_attempts_raise_persistence_error(
        self, database, shopper, shipping_address, make_product, fill_cart, stock_of
    ):
        store = SqlAlchemyStore(database, number_factory=lambda: "ORD-ALWAYS")
        product = make_product(stock=5)
        fill_cart(shopper, (product, 1))
        _create(store, shopper, shipping_address)

        fill_cart(shopper, (product, 1))
        with pytest.raises(PersistenceError):
            _create(store, shopper, shipping_address)

        assert stock_of(product.id) == 4
        assert _count(database, Order) == 1
