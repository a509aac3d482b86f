"""Shared BDD fixtures and step definitions for checkout and cancellation."""

from decimal import Decimal

import pytest
from ordering.models import CartItem, OrderStatus, PaymentMethod
from ordering.order.creation import CreateOrder, CreateOrderHandler
from ordering.order.lifecycle import AdvanceOrder, OrderLifecycleHandler
from pytest_bdd import given, parsers, then, when
from shared.errors import StorefrontError
from sqlalchemy import func, select


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def outcome():
    """Holds the last order placed and the last error raised by a When step."""
    return {"order": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a shopper with a saved address")
def _(shipping_address):
    return shipping_address


@given(parsers.cfparse('a product "{name}" priced {price} with {stock:d} in stock'))
def _(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('an inactive product "{name}" priced {price} with {stock:d} in stock'))
def _(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price=price, stock=stock, is_active=False)


@given(parsers.cfparse('the shopper has {quantity:d} of "{name}" in the cart'))
def _(fill_cart, shopper, products, quantity, name):
    fill_cart(shopper, (products[name], quantity))


@given(parsers.cfparse("the order has been {status}"))
def _(store, outcome, status):
    OrderLifecycleHandler(store).advance_order(AdvanceOrder(order_id=outcome["order"].id, target=OrderStatus[status]))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("the shopper places an order paying by {method}"))
@when(parsers.cfparse("the shopper places an order paying by {method}"))
def _(store, shopper, shipping_address, outcome, method):
    command = CreateOrder(
        user_id=shopper.id,
        address_id=shipping_address.id,
        payment_method=PaymentMethod[method],
    )
    try:
        outcome["order"] = CreateOrderHandler(store).create_order(command)
    except StorefrontError as exc:
        outcome["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order is {status}"))
def _(outcome, status):
    assert outcome["error"] is None
    assert outcome["order"].status == OrderStatus[status]


@then(parsers.cfparse("the order totals are subtotal {subtotal}, shipping {shipping}, tax {tax}, total {total}"))
def _(outcome, subtotal, shipping, tax, total):
    order = outcome["order"]
    assert (order.subtotal, order.shipping_cost, order.tax, order.total) == (
        Decimal(subtotal),
        Decimal(shipping),
        Decimal(tax),
        Decimal(total),
    )


@then(parsers.cfparse('the checkout fails with "{message}"'))
@then(parsers.cfparse('the cancellation fails with "{message}"'))
def _(outcome, message):
    assert outcome["error"] is not None
    assert outcome["error"].message == message


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(stock_of, products, name, stock):
    assert stock_of(products[name].id) == stock


@then("the shopper's cart is empty")
def _(database, shopper):
    assert _cart_lines(database, shopper) == 0


@then(parsers.cfparse("the shopper's cart holds {count:d} lines"))
def _(database, shopper, count):
    assert _cart_lines(database, shopper) == count


def _cart_lines(database, user):
    with database.transaction() as session:
        return session.scalar(select(func.count()).select_from(CartItem).where(CartItem.user_id == user.id))
