"""SQLAlchemy implementation of the checkout store.

Stock changes are single conditional UPDATE statements checked by affected
row count, so two transactions can never both take the last unit. On
PostgreSQL the product rows are additionally locked with SELECT ... FOR
UPDATE while the cart is validated; on SQLite the engine opens every
writing transaction with BEGIN IMMEDIATE (see ``shared.database``).
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from decimal import Decimal

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from catalogue.models import Product
from identity.models import Address
from ordering.models import CartItem, Order, OrderItem, OrderStatus, PaymentStatus
from ordering.order.numbering import generate_order_number
from ordering.store.port import CartLine, CheckoutStore, ProductSnapshot, StoreTransaction
from shared.database import Database, utc_now
from shared.errors import PersistenceError

logger = structlog.get_logger(__name__)

ORDER_NUMBER_ATTEMPTS = 5


def _snapshot(product: Product) -> ProductSnapshot:
    return ProductSnapshot(
        id=product.id,
        name=product.name,
        price=product.price,
        sale_price=product.sale_price,
        stock=product.stock,
        is_active=product.is_active,
    )


class SqlAlchemyTransaction(StoreTransaction):
    def __init__(self, session: Session, number_factory: Callable[[], str] = generate_order_number) -> None:
        self.session = session
        self.number_factory = number_factory

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def find_cart_items(self, user_id: str, lock: bool = False) -> list[CartLine]:
        items = self.session.scalars(
            select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.created_at, CartItem.id)
        ).all()
        if not items:
            return []

        # Lock in primary-key order so concurrent checkouts cannot deadlock
        product_stmt = (
            select(Product)
            .where(Product.id.in_(sorted({item.product_id for item in items})))
            .order_by(Product.id)
            .execution_options(populate_existing=True)
        )
        if lock:
            product_stmt = product_stmt.with_for_update()
        products = {product.id: product for product in self.session.scalars(product_stmt)}

        return [
            CartLine(
                item_id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                product=_snapshot(products[item.product_id]),
            )
            for item in items
        ]

    def find_address(self, address_id: str) -> Address | None:
        return self.session.get(Address, address_id)

    def find_order(self, order_id: str, user_id: str | None = None) -> Order | None:
        stmt = select(Order).where(Order.id == order_id).options(selectinload(Order.items))
        if user_id is not None:
            stmt = stmt.where(Order.user_id == user_id)
        return self.session.scalars(stmt).one_or_none()

    def list_orders(self, user_id: str, skip: int, take: int) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(skip)
            .limit(take)
        )
        return list(self.session.scalars(stmt))

    def count_orders(self, user_id: str) -> int:
        return self.session.scalar(select(func.count()).select_from(Order).where(Order.user_id == user_id))

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def create_order(self, **fields) -> Order:
        for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
            order = Order(order_number=self.number_factory(), **fields)
            try:
                with self.session.begin_nested():
                    self.session.add(order)
            except IntegrityError:
                logger.warning(
                    "Order insert conflicted, regenerating order number",
                    order_number=order.order_number,
                    attempt=attempt,
                )
                continue
            return order

        logger.error("Could not allocate a unique order number", attempts=ORDER_NUMBER_ATTEMPTS)
        raise PersistenceError()

    def create_order_item(
        self,
        order: Order,
        product_id: str,
        product_name: str,
        quantity: int,
        price: Decimal,
        total: Decimal,
    ) -> OrderItem:
        item = OrderItem(
            product_id=product_id,
            product_name=product_name,
            position=len(order.items),
            quantity=quantity,
            price=price,
            total=total,
        )
        order.items.append(item)
        return item

    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        result = self.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def increment_stock(self, product_id: str, quantity: int) -> None:
        self.session.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )

    def delete_cart_items(self, user_id: str) -> int:
        result = self.session.execute(
            delete(CartItem).where(CartItem.user_id == user_id).execution_options(synchronize_session=False)
        )
        return result.rowcount

    def transition_order_status(
        self,
        order: Order,
        allowed_from: set[OrderStatus],
        target: OrderStatus,
    ) -> bool:
        result = self.session.execute(
            update(Order)
            .where(Order.id == order.id, Order.status.in_(list(allowed_from)))
            .values(status=target, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        self.session.refresh(order, attribute_names=["status", "updated_at"])
        return True

    def update_payment(
        self,
        order: Order,
        payment_status: PaymentStatus,
        payment_intent_id: str | None = None,
        allowed_from: set[PaymentStatus] | None = None,
    ) -> bool:
        values = {"payment_status": payment_status, "updated_at": utc_now()}
        if payment_intent_id is not None:
            values["payment_intent_id"] = payment_intent_id

        stmt = update(Order).where(Order.id == order.id)
        if allowed_from is not None:
            stmt = stmt.where(Order.payment_status.in_(list(allowed_from)))
        result = self.session.execute(stmt.values(**values).execution_options(synchronize_session=False))
        if result.rowcount != 1:
            return False
        self.session.refresh(order, attribute_names=list(values))
        return True


class SqlAlchemyStore(CheckoutStore):
    def __init__(self, database: Database, number_factory: Callable[[], str] = generate_order_number) -> None:
        self.database = database
        self.number_factory = number_factory

    @contextmanager
    def transaction(self, read_only: bool = False) -> Iterator[SqlAlchemyTransaction]:
        with self.database.transaction(read_only=read_only) as session:
            yield SqlAlchemyTransaction(session, self.number_factory)
