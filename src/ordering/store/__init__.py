"""Checkout store: the port the checkout core depends on and its SQLAlchemy adapter."""

from ordering.store.port import CartLine, CheckoutStore, ProductSnapshot, StoreTransaction
from ordering.store.sqlalchemy_adapter import SqlAlchemyStore

__all__ = ["CartLine", "CheckoutStore", "ProductSnapshot", "SqlAlchemyStore", "StoreTransaction"]
