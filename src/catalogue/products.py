"""Catalogue reads for shoppers and writes for admins."""

import re
from dataclasses import dataclass
from decimal import Decimal

import structlog
from sqlalchemy import func, select

from catalogue.models import Category, Product
from shared.database import Database
from shared.errors import BusinessRuleError, CategoryNotFoundError, ProductNotFoundError, ValidationError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProductDetails:
    name: str
    price: Decimal
    stock: int = 0
    description: str | None = None
    sale_price: Decimal | None = None
    is_active: bool = True
    category_id: str | None = None


@dataclass(frozen=True)
class ProductPage:
    products: list[Product]
    page: int
    limit: int
    total: int


@dataclass(frozen=True)
class CategoryDetails:
    category: Category
    product_count: int


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _check_prices(price: Decimal, sale_price: Decimal | None) -> None:
    if sale_price is not None and sale_price > price:
        raise ValidationError("Sale price cannot exceed the list price")


class Catalogue:
    def __init__(self, database: Database) -> None:
        self.database = database

    # -------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------
    def list_products(
        self,
        page: int = 1,
        limit: int = 10,
        category_id: str | None = None,
        include_inactive: bool = False,
    ) -> ProductPage:
        filters = []
        if not include_inactive:
            filters.append(Product.is_active.is_(True))
        if category_id:
            filters.append(Product.category_id == category_id)

        with self.database.transaction(read_only=True) as session:
            products = list(
                session.scalars(
                    select(Product)
                    .where(*filters)
                    .order_by(Product.created_at.desc(), Product.id)
                    .offset((page - 1) * limit)
                    .limit(limit)
                )
            )
            total = session.scalar(select(func.count()).select_from(Product).where(*filters))
        return ProductPage(products=products, page=page, limit=limit, total=total)

    def get_product(self, product_id: str, include_inactive: bool = False) -> Product:
        with self.database.transaction(read_only=True) as session:
            product = session.get(Product, product_id)
        if product is None or not (product.is_active or include_inactive):
            raise ProductNotFoundError()
        return product

    def create_product(self, details: ProductDetails) -> Product:
        _check_prices(details.price, details.sale_price)
        with self.database.transaction() as session:
            if details.category_id and session.get(Category, details.category_id) is None:
                raise CategoryNotFoundError()
            product = Product(
                name=details.name,
                description=details.description,
                price=details.price,
                sale_price=details.sale_price,
                stock=details.stock,
                is_active=details.is_active,
                category_id=details.category_id,
            )
            session.add(product)

        logger.info("Product created", product_id=product.id, name=product.name, stock=product.stock)
        return product

    def update_product(self, product_id: str, changes: dict) -> Product:
        with self.database.transaction() as session:
            product = session.get(Product, product_id)
            if product is None:
                raise ProductNotFoundError()
            if changes.get("category_id") and session.get(Category, changes["category_id"]) is None:
                raise CategoryNotFoundError()
            for field, value in changes.items():
                setattr(product, field, value)
            _check_prices(product.price, product.sale_price)

        logger.info("Product updated", product_id=product_id, fields=sorted(changes))
        return product

    # -------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------
    def list_categories(self) -> list[Category]:
        with self.database.transaction(read_only=True) as session:
            return list(session.scalars(select(Category).where(Category.is_active.is_(True)).order_by(Category.name)))

    def get_category_by_slug(self, slug: str) -> CategoryDetails:
        with self.database.transaction(read_only=True) as session:
            category = session.scalars(select(Category).where(Category.slug == slug)).one_or_none()
            if category is None:
                raise CategoryNotFoundError()
            return CategoryDetails(category=category, product_count=self._product_count(session, category.id))

    def create_category(self, name: str, slug: str, description: str | None = None) -> Category:
        with self.database.transaction() as session:
            self._check_slug_free(session, slug)
            category = Category(name=name, slug=slug, description=description)
            session.add(category)
        return category

    def update_category(self, category_id: str, changes: dict) -> Category:
        """Apply ``changes``; renaming without an explicit slug re-derives the slug from the name."""
        if changes.get("name") and not changes.get("slug"):
            changes = {**changes, "slug": slugify(changes["name"])}
            if not changes["slug"]:
                raise ValidationError("Category name must contain letters or digits")

        with self.database.transaction() as session:
            category = session.get(Category, category_id)
            if category is None:
                raise CategoryNotFoundError()
            if changes.get("slug") and changes["slug"] != category.slug:
                self._check_slug_free(session, changes["slug"])
            for field, value in changes.items():
                setattr(category, field, value)

        logger.info("Category updated", category_id=category_id, fields=sorted(changes))
        return category

    def delete_category(self, category_id: str) -> None:
        with self.database.transaction() as session:
            category = session.get(Category, category_id)
            if category is None:
                raise CategoryNotFoundError()
            if self._product_count(session, category_id):
                raise BusinessRuleError("Cannot delete category with existing products")
            session.delete(category)

        logger.info("Category deleted", category_id=category_id)

    @staticmethod
    def _product_count(session, category_id: str) -> int:
        return session.scalar(select(func.count()).select_from(Product).where(Product.category_id == category_id))

    @staticmethod
    def _check_slug_free(session, slug: str) -> None:
        if session.scalar(select(Category.id).where(Category.slug == slug)) is not None:
            raise BusinessRuleError(f"Category slug {slug} is already in use")
