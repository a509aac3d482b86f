"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db    # Create all tables
    python src/manage.py drop-db     # Drop all tables
    python src/manage.py seed-demo   # Demo users, tokens, categories and products
"""

import argparse
import sys
from decimal import Decimal

from catalogue.products import Catalogue, ProductDetails
from identity.auth.token_adapter import DatabaseTokenProvider
from identity.models import Role, User
from shared.config import get_settings
from shared.database import get_database
from shared.logging import configure_logging

DEMO_PRODUCTS = [
    ("Cotton Kurta", Decimal("1299.00"), Decimal("999.00"), 25),
    ("Silk Saree", Decimal("4599.00"), None, 8),
    ("Leather Sandals", Decimal("799.00"), None, 40),
    ("Brass Diya Set", Decimal("349.00"), Decimal("299.00"), 1),
]


def setup_database():
    """Create every table."""
    print("Creating database schema...")
    get_database().setup_db()
    print("Done.")


def drop_database():
    """Drop every table."""
    print("Dropping database schema...")
    get_database().drop_db()
    print("Done.")


def seed_demo():
    """Create a shopper, an admin, bearer tokens for both and a small catalogue."""
    database = get_database()
    database.setup_db()

    with database.transaction() as session:
        shopper = User(email="shopper@example.com", first_name="Demo", last_name="Shopper", role=Role.USER)
        admin = User(email="admin@example.com", first_name="Demo", last_name="Admin", role=Role.ADMIN)
        session.add_all([shopper, admin])

    tokens = DatabaseTokenProvider(database)
    print(f"Shopper token: {tokens.issue_token(shopper.id)}")
    print(f"Admin token:   {tokens.issue_token(admin.id)}")

    catalogue = Catalogue(database)
    category = catalogue.create_category("Ethnic Wear", "ethnic-wear", "Kurtas, sarees and more")
    for name, price, sale_price, stock in DEMO_PRODUCTS:
        product = catalogue.create_product(
            ProductDetails(name=name, price=price, sale_price=sale_price, stock=stock, category_id=category.id)
        )
        print(f"  {product.name}: {product.id} (stock {product.stock})")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-demo", help="Create demo users, tokens and products")

    args = parser.parse_args()
    settings = get_settings()
    configure_logging(settings.environment, settings.log_dir)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-demo":
        seed_demo()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
