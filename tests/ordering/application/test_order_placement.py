"""Application tests for order placement against the in-memory unit of work."""

import threading
from decimal import Decimal

import pytest
from ordering.order.order import OrderStatus
from ordering.order.placement import OrderLine, place_order
from ordering.order.retrieval import get_order, list_customer_orders
from shared.errors import (
    Conflict,
    EmptyOrder,
    InsufficientStock,
    LockTimeout,
    ProductNotFound,
    TransientStorageError,
    ValidationError,
)
from shared.persistence.memory import InMemoryUnitOfWork


class FlakyUnitOfWork(InMemoryUnitOfWork):
    """Fails the first ``failures`` commits the way a deadlocked database would."""

    def __init__(self, store, failures):
        super().__init__(store)
        self.failures = failures

    def commit(self):
        if self.failures:
            self.failures -= 1
            raise TransientStorageError("deadlock detected")
        super().commit()


class TestPlaceOrder:
    def test_creates_pending_order_with_items(self, seed, uow):
        customer = seed.customer()
        widget = seed.product(name="Widget", price="10.00", stock=5)
        gadget = seed.product(name="Gadget", price="5.50", stock=5)

        order = place_order(uow, customer.id, [OrderLine(widget.id, 2), OrderLine(gadget.id, 1)])

        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Decimal("25.50")
        assert [(item.product_name, item.quantity, item.unit_price) for item in order.items] == [
            ("Widget", 2, Decimal("10.00")),
            ("Gadget", 1, Decimal("5.50")),
        ]

    def test_persisted_total_is_exact(self, seed, uow):
        customer = seed.customer()
        widget = seed.product(price="10.00")
        gadget = seed.product(price="5.50")

        order = place_order(uow, customer.id, [OrderLine(widget.id, 2), OrderLine(gadget.id, 1)])

        assert get_order(uow, order.id, customer.id).total_amount == Decimal("25.50")

    def test_decrements_stock(self, seed, uow):
        customer = seed.customer()
        product = seed.product(stock=5)
        place_order(uow, customer.id, [OrderLine(product.id, 3)])
        assert seed.stock_of(product.id) == 2

    def test_exact_remaining_stock_can_be_bought(self, seed, uow):
        customer = seed.customer()
        product = seed.product(stock=2)
        place_order(uow, customer.id, [OrderLine(product.id, 2)])
        assert seed.stock_of(product.id) == 0

    def test_repeated_product_lines_share_the_stock(self, seed, uow):
        customer = seed.customer()
        product = seed.product(stock=3)
        with pytest.raises(InsufficientStock):
            place_order(uow, customer.id, [OrderLine(product.id, 2), OrderLine(product.id, 2)])
        assert seed.stock_of(product.id) == 3

    def test_currency_is_recorded(self, seed, uow):
        customer = seed.customer()
        product = seed.product()
        order = place_order(uow, customer.id, [OrderLine(product.id, 1)], currency="eur")
        assert order.currency == "eur"


class TestValidation:
    def test_empty_order(self, uow):
        with pytest.raises(EmptyOrder):
            place_order(uow, "cust-001", [])
        assert uow.commits == 0

    @pytest.mark.parametrize("quantity", [0, -3, 1.5, True])
    def test_bad_quantity(self, seed, uow, quantity):
        product = seed.product()
        with pytest.raises(ValidationError):
            place_order(uow, "cust-001", [OrderLine(product.id, quantity)])

    def test_blank_product_id(self, uow):
        with pytest.raises(ValidationError):
            place_order(uow, "cust-001", [OrderLine("  ", 1)])


class TestAtomicity:
    def test_insufficient_stock_on_a_later_line_changes_nothing(self, seed, uow):
        customer = seed.customer()
        plenty = seed.product(name="Plenty", stock=10)
        scarce = seed.product(name="Scarce", stock=1)

        with pytest.raises(InsufficientStock):
            place_order(uow, customer.id, [OrderLine(plenty.id, 2), OrderLine(scarce.id, 3)])

        assert seed.stock_of(plenty.id) == 10
        assert seed.stock_of(scarce.id) == 1
        assert list_customer_orders(uow, customer.id) == []
        with uow:
            assert uow.orders.count_items_for_product(plenty.id) == 0

    def test_unknown_product_changes_nothing(self, seed, uow):
        customer = seed.customer()
        product = seed.product(stock=10)

        with pytest.raises(ProductNotFound):
            place_order(uow, customer.id, [OrderLine(product.id, 1), OrderLine("missing", 1)])

        assert seed.stock_of(product.id) == 10
        assert list_customer_orders(uow, customer.id) == []


class TestConcurrency:
    def test_no_overselling(self, store, seed):
        customer = seed.customer()
        product = seed.product(stock=5)
        attempts = 20
        barrier = threading.Barrier(attempts)
        outcomes = []
        outcomes_lock = threading.Lock()

        def buy_one():
            barrier.wait()
            try:
                place_order(InMemoryUnitOfWork(store, lock_timeout_ms=5000), customer.id, [OrderLine(product.id, 1)])
                result = "ok"
            except InsufficientStock:
                result = "insufficient"
            with outcomes_lock:
                outcomes.append(result)

        threads = [threading.Thread(target=buy_one) for _ in range(attempts)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert outcomes.count("ok") == 5
        assert outcomes.count("insufficient") == attempts - 5
        assert seed.stock_of(product.id) == 0

    def test_opposite_line_orders_do_not_deadlock(self, store, seed):
        customer = seed.customer()
        first = seed.product(name="First", stock=50)
        second = seed.product(name="Second", stock=50)
        errors = []

        def buy(lines):
            try:
                for _ in range(10):
                    place_order(InMemoryUnitOfWork(store, lock_timeout_ms=5000), customer.id, lines)
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        forwards = threading.Thread(target=buy, args=([OrderLine(first.id, 1), OrderLine(second.id, 1)],))
        backwards = threading.Thread(target=buy, args=([OrderLine(second.id, 1), OrderLine(first.id, 1)],))
        forwards.start()
        backwards.start()
        forwards.join(timeout=30)
        backwards.join(timeout=30)

        assert errors == []
        assert seed.stock_of(first.id) == 30
        assert seed.stock_of(second.id) == 30

    def test_lock_wait_times_out(self, store, seed):
        customer = seed.customer()
        product = seed.product(stock=5)
        holder = InMemoryUnitOfWork(store)

        with holder:
            holder.products.get_for_update(product.id)
            with pytest.raises(LockTimeout):
                place_order(InMemoryUnitOfWork(store, lock_timeout_ms=50), customer.id, [OrderLine(product.id, 1)])

        assert seed.stock_of(product.id) == 5


class TestRetry:
    def test_transient_failures_are_retried(self, store, seed):
        customer = seed.customer()
        product = seed.product(stock=5)
        flaky = FlakyUnitOfWork(store, failures=2)

        order = place_order(flaky, customer.id, [OrderLine(product.id, 1)], max_attempts=3)

        assert seed.stock_of(product.id) == 4
        assert get_order(flaky, order.id, customer.id).total_amount == Decimal("10.00")

    def test_exhausted_retries_are_a_conflict(self, store, seed):
        customer = seed.customer()
        product = seed.product(stock=5)

        with pytest.raises(Conflict):
            place_order(FlakyUnitOfWork(store, failures=5), customer.id, [OrderLine(product.id, 1)], max_attempts=2)

        assert seed.stock_of(product.id) == 5
