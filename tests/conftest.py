import os
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from catalogue.models import Product
from identity.auth import reset_identity_provider, set_identity_provider
from identity.auth.fake_adapter import FakeIdentityProvider
from identity.models import Address, AddressType, Role, User
from ordering.models import CartItem, Order, OrderItem, OrderStatus, PaymentMethod, PaymentStatus
from ordering.pricing import LineItem, price_lines
from ordering.store import SqlAlchemyStore
from payments.gateway import reset_gateway, set_gateway
from payments.gateway.fake_adapter import FakeGateway
from shared.database import Database, reset_database, set_database, utc_now


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------
@pytest.fixture()
def database(tmp_path):
    """A fresh database per test: a SQLite file, or STOREFRONT_TEST_DATABASE_URL when set."""
    url = os.environ.get("STOREFRONT_TEST_DATABASE_URL") or f"sqlite:///{tmp_path / 'storefront.db'}"
    db = Database(url)
    db.drop_db()
    db.setup_db()
    set_database(db)

    yield db

    db.drop_db()
    reset_database()


@pytest.fixture()
def store(database):
    return SqlAlchemyStore(database)


@pytest.fixture()
def identity_provider():
    provider = FakeIdentityProvider()
    set_identity_provider(provider)
    yield provider
    reset_identity_provider()


@pytest.fixture()
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_user(database):
    counter = iter(range(1, 10_000))

    def _make(role=Role.USER, is_active=True, **overrides):
        n = next(counter)
        user = User(
            email=overrides.pop("email", f"user{n}@example.com"),
            first_name=overrides.pop("first_name", f"User{n}"),
            role=role,
            is_active=is_active,
            **overrides,
        )
        with database.transaction() as session:
            session.add(user)
        return user

    return _make


@pytest.fixture()
def make_product(database):
    def _make(name="Cotton Kurta", price="500", stock=10, sale_price=None, is_active=True, **overrides):
        product = Product(
            name=name,
            price=Decimal(price),
            sale_price=Decimal(sale_price) if sale_price is not None else None,
            stock=stock,
            is_active=is_active,
            **overrides,
        )
        with database.transaction() as session:
            session.add(product)
        return product

    return _make


@pytest.fixture()
def make_address(database):
    def _make(user, is_default=True, **overrides):
        fields = {
            "name": "Asha Rao",
            "phone": "9876543210",
            "street": "12 MG Road, Indiranagar",
            "city": "Bengaluru",
            "state": "Karnataka",
            "pincode": "560038",
            "type": AddressType.HOME,
            "is_default": is_default,
        }
        fields.update(overrides)
        address = Address(user_id=user.id, **fields)
        with database.transaction() as session:
            session.add(address)
        return address

    return _make


@pytest.fixture()
def fill_cart(database):
    def _fill(user, *lines):
        """Put ``(product, quantity)`` pairs into the user's cart."""
        start = utc_now()
        with database.transaction() as session:
            for n, (product, quantity) in enumerate(lines):
                session.add(
                    CartItem(
                        user_id=user.id,
                        product_id=product.id,
                        quantity=quantity,
                        created_at=start + timedelta(milliseconds=n),
                    )
                )

    return _fill


@pytest.fixture()
def make_order(database):
    """Insert an order directly, bypassing checkout (stock is not touched)."""
    counter = iter(range(1, 10_000))

    def _make(
        user,
        *lines,
        address=None,
        status=OrderStatus.CONFIRMED,
        payment_method=PaymentMethod.COD,
        payment_status=PaymentStatus.PENDING,
        created_at=None,
    ):
        pricing = price_lines(LineItem(product.effective_price, quantity) for product, quantity in lines)
        order = Order(
            user_id=user.id,
            address_id=address.id if address else None,
            order_number=f"ORDTEST{next(counter):06d}",
            payment_method=payment_method,
            payment_status=payment_status,
            status=status,
            subtotal=pricing.subtotal,
            shipping_cost=pricing.shipping_cost,
            tax=pricing.tax,
            total=pricing.total,
        )
        if created_at is not None:
            order.created_at = created_at
        for position, (product, quantity) in enumerate(lines):
            line = LineItem(product.effective_price, quantity)
            order.items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    position=position,
                    quantity=quantity,
                    price=line.unit_price,
                    total=line.total,
                )
            )
        with database.transaction() as session:
            session.add(order)
        return order

    return _make


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
@pytest.fixture()
def stock_of(database):
    def _stock(product_id):
        with database.transaction() as session:
            return session.get(Product, product_id).stock

    return _stock


@pytest.fixture()
def shopper(make_user):
    return make_user()


@pytest.fixture()
def shipping_address(make_address, shopper):
    return make_address(shopper)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def client(database, identity_provider, gateway):
    from fastapi.testclient import TestClient

    from app import app

    return TestClient(app)


@pytest.fixture()
def auth_headers(identity_provider):
    def _headers(user, role=None):
        token = f"token-{user.id}"
        identity_provider.register(token, user.id, role=role or user.role, is_active=user.is_active)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def shopper_headers(auth_headers, shopper):
    return auth_headers(shopper)


@pytest.fixture()
def admin_headers(auth_headers, make_user):
    return auth_headers(make_user(role=Role.ADMIN))
