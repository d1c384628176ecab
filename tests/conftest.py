import os
from decimal import Decimal
from pathlib import Path

import pytest

# Seeded accounts use the minimum bcrypt cost; the cost is read back from the hash.
SEED_PASSWORD = "seed-password"


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Pins the environment and makes sure no real gateway credentials leak into
    the test run, so the fake gateway is the default.
    """
    os.environ["ENVIRONMENT"] = session.config.option.env
    os.environ.pop("STRIPE_SECRET_KEY", None)

    from shared.config import get_settings

    get_settings.cache_clear()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path) or "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically reset process-wide state after every test"""
    yield

    from payments.gateway import reset_gateway
    from shared.config import get_settings

    reset_gateway()
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------
@pytest.fixture()
def store():
    from shared.persistence.memory import InMemoryStore

    return InMemoryStore()


@pytest.fixture()
def uow(store):
    from shared.persistence.memory import InMemoryUnitOfWork

    return InMemoryUnitOfWork(store, lock_timeout_ms=2000)


@pytest.fixture()
def sql_engine():
    from shared.persistence.sql import build_engine, create_schema

    engine = build_engine("sqlite://")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def sql_uow(sql_engine):
    from shared.persistence.sql import SqlAlchemyUnitOfWork, build_session_factory

    return SqlAlchemyUnitOfWork(build_session_factory(sql_engine), lock_timeout_ms=2000)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------
class Seeder:
    """Writes fixtures straight through the repositories of a unit of work."""

    password = SEED_PASSWORD

    def __init__(self, uow):
        self.uow = uow

    def customer(self, email="jane@example.com", name="Jane Doe", role="customer"):
        from identity.customer.customer import Customer
        from identity.customer.passwords import hash_password

        customer = Customer(
            email=email,
            name=name,
            password_hash=hash_password(SEED_PASSWORD, rounds=4),
            role=role,
        )
        with self.uow:
            self.uow.customers.add(customer)
            self.uow.commit()
        return customer

    def category(self, name="Apparel"):
        from catalogue.category.category import Category

        category = Category(name=name)
        with self.uow:
            self.uow.categories.add(category)
            self.uow.commit()
        return category

    def product(self, name="Widget", price="10.00", stock=10, **fields):
        from catalogue.product.product import Product

        product = Product(name=name, price=Decimal(price), stock=stock, **fields)
        with self.uow:
            self.uow.products.add(product)
            self.uow.commit()
        return product

    def stock_of(self, product_id):
        with self.uow:
            return self.uow.products.get(product_id).stock


@pytest.fixture()
def seed(uow):
    return Seeder(uow)


@pytest.fixture()
def sql_seed(sql_uow):
    return Seeder(sql_uow)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def gateway():
    from payments.gateway import FakeGateway

    return FakeGateway()


@pytest.fixture()
def client(store, gateway):
    from app import create_app
    from fastapi.testclient import TestClient
    from shared.persistence.memory import InMemoryUnitOfWork

    app = create_app(uow_factory=lambda: InMemoryUnitOfWork(store, lock_timeout_ms=2000), gateway=gateway)
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    from identity.customer.tokens import issue_token
    from shared.config import get_settings

    def _headers(customer):
        return {"Authorization": f"Bearer {issue_token(customer, get_settings())}"}

    return _headers
