"""Tests for the SQLAlchemy unit of work and driver error translation (SQLite)."""

import pytest
from catalogue.category.category import Category
from catalogue.product.product import Product
from shared.errors import Conflict, LockTimeout, TransientStorageError
from shared.persistence.errors import translate_db_errors
from sqlalchemy.exc import OperationalError


class _DriverError(Exception):
    def __init__(self, pgcode):
        super().__init__(f"driver error {pgcode}")
        self.pgcode = pgcode


def _operational_error(pgcode):
    return OperationalError("SELECT 1", {}, _DriverError(pgcode))


class TestTransactions:
    def test_commit_persists(self, sql_uow):
        product = Product(name="Widget", price="3.20", stock=4)
        with sql_uow:
            sql_uow.products.add(product)
            sql_uow.commit()
        with sql_uow:
            loaded = sql_uow.products.get(product.id)
        assert loaded.price == product.price
        assert loaded.stock == 4

    def test_leaving_without_commit_rolls_back(self, sql_uow):
        product = Product(name="Widget", price="3.20")
        with sql_uow:
            sql_uow.products.add(product)
        with sql_uow:
            assert sql_uow.products.get(product.id) is None

    def test_exception_rolls_back(self, sql_uow):
        product = Product(name="Widget", price="3.20")
        with pytest.raises(RuntimeError):
            with sql_uow:
                sql_uow.products.add(product)
                raise RuntimeError("boom")
        with sql_uow:
            assert sql_uow.products.get(product.id) is None

    def test_unique_violation_becomes_conflict(self, sql_uow):
        with sql_uow:
            sql_uow.categories.add(Category(name="Apparel"))
            sql_uow.commit()
        with sql_uow:
            with pytest.raises(Conflict):
                sql_uow.categories.add(Category(name="Apparel"))


class TestTranslateDbErrors:
    @pytest.mark.parametrize("pgcode", ["55P03", "57014"])
    def test_lock_wait_codes_become_lock_timeout(self, pgcode):
        with pytest.raises(LockTimeout):
            with translate_db_errors():
                raise _operational_error(pgcode)

    @pytest.mark.parametrize("pgcode", ["40P01", "40001"])
    def test_deadlock_and_serialization_codes_are_transient(self, pgcode):
        with pytest.raises(TransientStorageError):
            with translate_db_errors():
                raise _operational_error(pgcode)

    def test_other_driver_errors_propagate(self):
        with pytest.raises(OperationalError):
            with translate_db_errors():
                raise _operational_error("08006")
