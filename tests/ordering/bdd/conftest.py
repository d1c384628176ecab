"""Shared BDD fixtures and step definitions for the Ordering domain."""

from decimal import Decimal

import pytest
from pytest_bdd import given, parsers


@pytest.fixture()
def catalogue():
    """Products created by the scenario, by name."""
    return {}


@given("a customer", target_fixture="customer")
def _(seed):
    return seed.customer()


@given(parsers.cfparse('a product "{name}" priced {price} with {stock:d} in stock'))
def _(seed, catalogue, name, price, stock):
    catalogue[name] = seed.product(name=name, price=str(Decimal(price)), stock=stock)
