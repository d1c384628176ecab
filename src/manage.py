"""Storefront database management CLI.

Provides commands to create, drop and seed the database schema.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Demo category, products and an admin account
"""

import argparse
import os
import sys
from decimal import Decimal

from shared.config import get_settings
from shared.persistence.sql import (
    SqlAlchemyUnitOfWork,
    build_engine,
    build_session_factory,
    create_schema,
    drop_schema,
)

DEMO_PRODUCTS = [
    ("Classic Black T-Shirt", "Premium cotton crew-neck tee.", Decimal("19.99"), 50),
    ("Canvas Tote Bag", "Heavy canvas bag with inner pocket.", Decimal("12.50"), 30),
    ("Enamel Mug", "Camp-style enamel mug, 350 ml.", Decimal("9.00"), 0),
]


def _engine(database_url=None):
    return build_engine(database_url or get_settings().database_url)


def setup_database(database_url=None):
    """Create every table."""
    engine = _engine(database_url)
    print(f"Creating schema on {engine.url.render_as_string(hide_password=True)}...")
    create_schema(engine)
    print("Done.")


def drop_database(database_url=None):
    """Drop every table."""
    engine = _engine(database_url)
    print(f"Dropping schema on {engine.url.render_as_string(hide_password=True)}...")
    drop_schema(engine)
    print("Done.")


def seed_database(database_url=None, admin_email="admin@example.com", admin_password=None):
    """Insert a demo category, a few products and an administrator."""
    from catalogue.category.management import upsert_category
    from catalogue.product.management import create_product
    from identity.customer.account import update_role
    from identity.customer.registration import register_customer

    settings = get_settings()
    engine = _engine(database_url)
    create_schema(engine)
    uow = SqlAlchemyUnitOfWork(build_session_factory(engine), lock_timeout_ms=settings.lock_timeout_ms)

    category = upsert_category(uow, "Apparel")
    for name, description, price, stock in DEMO_PRODUCTS:
        product = create_product(
            uow, name=name, price=price, stock=stock, description=description, category_id=category.id
        )
        print(f"  product {product.id}  {product.name}  {product.price}  stock={product.stock}")

    password = admin_password or os.getenv("ADMIN_PASSWORD", "admin-password")
    admin = register_customer(uow, email=admin_email, name="Administrator", password=password)
    update_role(uow, admin.id, "admin")
    print(f"  admin {admin.email} ({admin.id})")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    seed_parser = subparsers.add_parser("seed", help="Insert demo data")
    seed_parser.add_argument("--admin-email", default="admin@example.com")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database(args.database_url)
    elif args.command == "drop-db":
        drop_database(args.database_url)
    elif args.command == "seed":
        seed_database(args.database_url, admin_email=args.admin_email)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
