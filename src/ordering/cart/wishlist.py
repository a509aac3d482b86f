"""Wishlist: products a user has saved for later."""

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from catalogue.models import Product
from ordering.models import WishlistItem
from shared.database import Database
from shared.errors import ProductNotFoundError, WishlistItemNotFoundError


class WishlistService:
    def __init__(self, database: Database) -> None:
        self.database = database

    def list_wishlist(self, user_id: str) -> list[WishlistItem]:
        with self.database.transaction(read_only=True) as session:
            return list(
                session.scalars(
                    select(WishlistItem)
                    .where(WishlistItem.user_id == user_id)
                    .options(selectinload(WishlistItem.product))
                    .order_by(WishlistItem.created_at.desc())
                )
            )

    def add_to_wishlist(self, user_id: str, product_id: str) -> WishlistItem:
        """Save a product; adding one that is already saved returns the existing entry."""
        with self.database.transaction() as session:
            product = session.get(Product, product_id)
            if product is None:
                raise ProductNotFoundError()

            item = session.scalars(
                select(WishlistItem).where(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
            ).one_or_none()
            if item is None:
                item = WishlistItem(user_id=user_id, product_id=product_id)
                session.add(item)
            item.product = product
        return item

    def remove_from_wishlist(self, user_id: str, product_id: str) -> None:
        with self.database.transaction() as session:
            item = session.scalars(
                select(WishlistItem).where(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
            ).one_or_none()
            if item is None:
                raise WishlistItemNotFoundError()
            session.delete(item)
