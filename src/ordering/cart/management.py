"""Shopping cart management: one row per (user, product), merged on add."""

import structlog
from sqlalchemy import delete, select

from catalogue.models import Product
from ordering.checkout.preview import PricedCart, price_cart
from ordering.models import CartItem
from ordering.store.port import CheckoutStore
from shared.database import Database
from shared.errors import (
    CartItemNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
    ProductUnavailableError,
)

logger = structlog.get_logger(__name__)


class CartService:
    def __init__(self, database: Database, store: CheckoutStore) -> None:
        self.database = database
        self.store = store

    def get_cart(self, user_id: str) -> PricedCart:
        with self.store.transaction(read_only=True) as tx:
            lines = tx.find_cart_items(user_id)
        return price_cart(lines)

    def add_to_cart(self, user_id: str, product_id: str, quantity: int = 1) -> CartItem:
        with self.database.transaction() as session:
            product = session.get(Product, product_id)
            if product is None:
                raise ProductNotFoundError()
            if not product.is_active:
                raise ProductUnavailableError(product.name)

            item = session.scalars(
                select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
            ).one_or_none()
            new_quantity = quantity + (item.quantity if item else 0)
            if product.stock < new_quantity:
                raise InsufficientStockError(product.name)

            if item is None:
                item = CartItem(user_id=user_id, product_id=product_id, quantity=new_quantity)
                session.add(item)
            else:
                item.quantity = new_quantity
            item.product = product

        logger.debug("Cart item saved", user_id=user_id, product_id=product_id, quantity=new_quantity)
        return item

    def update_cart_item(self, user_id: str, item_id: str, quantity: int) -> CartItem:
        with self.database.transaction() as session:
            item = self._owned_item(session, user_id, item_id)
            product = session.get(Product, item.product_id)
            if product.stock < quantity:
                raise InsufficientStockError(product.name)
            item.quantity = quantity
            item.product = product
        return item

    def remove_cart_item(self, user_id: str, item_id: str) -> None:
        with self.database.transaction() as session:
            session.delete(self._owned_item(session, user_id, item_id))

    def clear_cart(self, user_id: str) -> int:
        with self.database.transaction() as session:
            result = session.execute(delete(CartItem).where(CartItem.user_id == user_id))
        return result.rowcount

    @staticmethod
    def _owned_item(session, user_id: str, item_id: str) -> CartItem:
        item = session.scalars(
            select(CartItem).where(CartItem.id == item_id, CartItem.user_id == user_id)
        ).one_or_none()
        if item is None:
            raise CartItemNotFoundError()
        return item
