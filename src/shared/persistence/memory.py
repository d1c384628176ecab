"""In-memory storage with transactional staging and per-row locks.

``InMemoryStore`` plays the database: it holds committed rows and hands out
row locks. Each ``InMemoryUnitOfWork`` entry opens a transaction that stages
writes privately and publishes them on commit, so concurrent units of work
behave like sessions against a real engine:

* reads see committed data plus the transaction's own staged writes,
* ``lock()`` blocks while another transaction holds the row, bounded by the
  lock timeout, and the lock is kept until commit or rollback,
* unique constraints are checked against committed and staged rows.
"""

import copy
import itertools
import threading
from collections.abc import Callable, Iterator
from typing import Any

from shared.errors import Conflict, LockTimeout
from shared.persistence.unit_of_work import AbstractUnitOfWork

TABLES = ("categories", "products", "customers", "orders", "order_items", "payments")
UNIQUE_COLUMNS = {
    "categories": ("name",),
    "customers": ("email",),
    "payments": ("provider_payment_id",),
}


class InMemoryStore:
    """Committed state shared by every unit of work built on it."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, Any]] = {name: {} for name in TABLES}
        self.sequence: dict[tuple[str, str], int] = {}
        self.commit_lock = threading.Lock()
        self._counter = itertools.count()
        self._row_locks: dict[tuple[str, str], threading.Lock] = {}
        self._row_locks_guard = threading.Lock()

    def row_lock(self, table: str, key: str) -> threading.Lock:
        with self._row_locks_guard:
            return self._row_locks.setdefault((table, key), threading.Lock())

    def next_sequence(self) -> int:
        return next(self._counter)

    def reset(self) -> None:
        with self.commit_lock:
            for rows in self.tables.values():
                rows.clear()
            self.sequence.clear()


class InMemoryTransaction:
    def __init__(self, store: InMemoryStore, lock_timeout: float) -> None:
        self.store = store
        self.lock_timeout = lock_timeout
        self.staged: dict[str, dict[str, Any]] = {name: {} for name in TABLES}
        self.deleted: dict[str, set[str]] = {name: set() for name in TABLES}
        self._held: dict[tuple[str, str], threading.Lock] = {}

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def read(self, table: str, key: str) -> Any | None:
        if key in self.deleted[table]:
            return None
        if key in self.staged[table]:
            return self.staged[table][key]
        with self.store.commit_lock:
            row = self.store.tables[table].get(key)
            return copy.deepcopy(row) if row is not None else None

    def rows(self, table: str) -> list[Any]:
        """All visible rows of a table, in insertion order."""
        with self.store.commit_lock:
            committed = {
                key: copy.deepcopy(row) for key, row in self.store.tables[table].items() if key not in self.deleted[table]
            }
            sequence = dict(self.store.sequence)
        committed.update(self.staged[table])
        ordered = sorted(committed.items(), key=lambda kv: sequence.get((table, kv[0]), float("inf")))
        return [row for _, row in ordered]

    def find(self, table: str, predicate: Callable[[Any], bool]) -> Iterator[Any]:
        return (row for row in self.rows(table) if predicate(row))

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def write(self, table: str, key: str, row: Any) -> None:
        self.deleted[table].discard(key)
        self.staged[table][key] = row

    def delete(self, table: str, key: str) -> None:
        self.staged[table].pop(key, None)
        self.deleted[table].add(key)

    def ensure_unique(self, table: str, key: str, column: str, value: Any) -> None:
        if value is None:
            return
        for row in self.rows(table):
            if row.id != key and getattr(row, column) == value:
                raise Conflict(f"{table}.{column} already exists", {column: [str(value)]})

    # -------------------------------------------------------------------
    # Row locks
    # -------------------------------------------------------------------
    def lock(self, table: str, key: str) -> None:
        if (table, key) in self._held:
            return
        row_lock = self.store.row_lock(table, key)
        if not row_lock.acquire(timeout=self.lock_timeout):
            raise LockTimeout(f"Timed out waiting for {table} row {key}", {"table": table, "id": key})
        self._held[(table, key)] = row_lock

    # -------------------------------------------------------------------
    # Outcome
    # -------------------------------------------------------------------
    def commit(self) -> None:
        with self.store.commit_lock:
            self._check_unique_columns()
            for table, rows in self.staged.items():
                for key, row in rows.items():
                    if (table, key) not in self.store.sequence:
                        self.store.sequence[(table, key)] = self.store.next_sequence()
                    self.store.tables[table][key] = copy.deepcopy(row)
            for table, keys in self.deleted.items():
                for key in keys:
                    self.store.tables[table].pop(key, None)
        self._discard()

    def rollback(self) -> None:
        self._discard()

    def _check_unique_columns(self) -> None:
        # Caller holds the commit lock; a concurrent commit may have claimed a value after ensure_unique ran.
        for table, columns in UNIQUE_COLUMNS.items():
            committed = self.store.tables[table]
            for key, row in self.staged[table].items():
                for column in columns:
                    value = getattr(row, column)
                    if value is None:
                        continue
                    for other_key, other in committed.items():
                        if other_key != key and other_key not in self.deleted[table] and getattr(other, column) == value:
                            raise Conflict(f"{table}.{column} already exists", {column: [str(value)]})

    def _discard(self) -> None:
        for rows in self.staged.values():
            rows.clear()
        for keys in self.deleted.values():
            keys.clear()
        held, self._held = self._held, {}
        for row_lock in held.values():
            row_lock.release()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Unit of work over an ``InMemoryStore``; one per thread of control."""

    def __init__(self, store: InMemoryStore | None = None, lock_timeout_ms: int = 5000) -> None:
        self.store = store or InMemoryStore()
        self.lock_timeout_ms = lock_timeout_ms
        self.transaction: InMemoryTransaction | None = None
        self.commits = 0

    def __enter__(self) -> "InMemoryUnitOfWork":
        from catalogue.category.repository import InMemoryCategoryRepository
        from catalogue.product.repository import InMemoryProductRepository
        from identity.customer.repository import InMemoryCustomerRepository
        from ordering.order.repository import InMemoryOrderRepository
        from payments.payment.repository import InMemoryPaymentRepository

        self.transaction = InMemoryTransaction(self.store, self.lock_timeout_ms / 1000)
        self.categories = InMemoryCategoryRepository(self.transaction)
        self.products = InMemoryProductRepository(self.transaction)
        self.customers = InMemoryCustomerRepository(self.transaction)
        self.orders = InMemoryOrderRepository(self.transaction)
        self.payments = InMemoryPaymentRepository(self.transaction)
        return super().__enter__()

    def __exit__(self, *args) -> None:
        super().__exit__(*args)
        self.transaction = None

    def commit(self) -> None:
        self.transaction.commit()
        self.commits += 1

    def rollback(self) -> None:
        if self.transaction is not None:
            self.transaction.rollback()
