"""Order repository port and adapters.

Orders and their items are written separately: placement inserts the order
row first and then one item per line, all inside one transaction.
"""

from abc import ABC, abstractmethod
from dataclasses import replace

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ordering.order.order import Order, OrderItem
from shared.persistence.errors import translate_db_errors
from shared.persistence.tables import OrderItemRecord, OrderRecord

TABLE = "orders"
ITEMS_TABLE = "order_items"


class OrderRepository(ABC):
    @abstractmethod
    def add(self, order: Order) -> None:
        """Insert the order row (items are added with ``add_item``)."""

    @abstractmethod
    def add_item(self, item: OrderItem) -> None: ...

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist status, total and timestamps of an existing order."""

    @abstractmethod
    def get(self, order_id: str) -> Order | None: ...

    @abstractmethod
    def get_for_update(self, order_id: str) -> Order | None:
        """Read an order and hold its row lock until the transaction ends."""

    @abstractmethod
    def list_for_customer(self, customer_id: str) -> list[Order]:
        """A customer's orders, newest first, with their items."""

    @abstractmethod
    def count_items_for_product(self, product_id: str) -> int: ...


# ---------------------------------------------------------------------------
# SQLAlchemy
# ---------------------------------------------------------------------------
def _item_to_domain(record: OrderItemRecord) -> OrderItem:
    return OrderItem(
        id=record.id,
        order_id=record.order_id,
        product_id=record.product_id,
        product_name=record.product_name,
        quantity=record.quantity,
        unit_price=record.unit_price,
    )


def _to_domain(record: OrderRecord, items: list[OrderItemRecord]) -> Order:
    return Order(
        id=record.id,
        customer_id=record.customer_id,
        status=record.status,
        total_amount=record.total_amount,
        currency=record.currency,
        items=[_item_to_domain(item) for item in items],
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: Session) -> None:
        self.session = session
        self._positions: dict[str, int] = {}

    def _items_for(self, order_ids: list[str]) -> dict[str, list[OrderItemRecord]]:
        grouped: dict[str, list[OrderItemRecord]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return grouped
        statement = (
            select(OrderItemRecord)
            .where(OrderItemRecord.order_id.in_(order_ids))
            .order_by(OrderItemRecord.order_id, OrderItemRecord.position)
        )
        for record in self.session.execute(statement).scalars():
            grouped[record.order_id].append(record)
        return grouped

    def add(self, order: Order) -> None:
        self.session.add(
            OrderRecord(
                id=order.id,
                customer_id=order.customer_id,
                status=order.status.value,
                total_amount=order.total_amount,
                currency=order.currency,
                created_at=order.created_at,
                updated_at=order.updated_at,
            )
        )
        with translate_db_errors():
            self.session.flush()

    def add_item(self, item: OrderItem) -> None:
        position = self._positions.get(item.order_id, 0)
        self._positions[item.order_id] = position + 1
        self.session.add(
            OrderItemRecord(
                id=item.id,
                order_id=item.order_id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                position=position,
            )
        )
        with translate_db_errors():
            self.session.flush()

    def save(self, order: Order) -> None:
        record = self.session.get(OrderRecord, order.id)
        record.status = order.status.value
        record.total_amount = order.total_amount
        record.updated_at = order.updated_at
        with translate_db_errors():
            self.session.flush()

    def get(self, order_id: str) -> Order | None:
        record = self.session.get(OrderRecord, order_id)
        if record is None:
            return None
        return _to_domain(record, self._items_for([order_id])[order_id])

    def get_for_update(self, order_id: str) -> Order | None:
        statement = (
            select(OrderRecord)
            .where(OrderRecord.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        with translate_db_errors():
            record = self.session.execute(statement).scalar_one_or_none()
        if record is None:
            return None
        return _to_domain(record, self._items_for([order_id])[order_id])

    def list_for_customer(self, customer_id: str) -> list[Order]:
        statement = (
            select(OrderRecord)
            .where(OrderRecord.customer_id == customer_id)
            .order_by(OrderRecord.created_at.desc(), OrderRecord.id)
        )
        records = self.session.execute(statement).scalars().all()
        items = self._items_for([record.id for record in records])
        return [_to_domain(record, items[record.id]) for record in records]

    def count_items_for_product(self, product_id: str) -> int:
        statement = select(func.count()).select_from(OrderItemRecord).where(OrderItemRecord.product_id == product_id)
        return self.session.execute(statement).scalar_one()


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------
class InMemoryOrderRepository(OrderRepository):
    def __init__(self, transaction) -> None:
        self.transaction = transaction

    def _with_items(self, header: Order) -> Order:
        header.items = [item for item in self.transaction.rows(ITEMS_TABLE) if item.order_id == header.id]
        return header

    def add(self, order: Order) -> None:
        self.transaction.write(TABLE, order.id, replace(order, items=[]))

    def add_item(self, item: OrderItem) -> None:
        self.transaction.write(ITEMS_TABLE, item.id, replace(item))

    def save(self, order: Order) -> None:
        self.transaction.write(TABLE, order.id, replace(order, items=[]))

    def get(self, order_id: str) -> Order | None:
        header = self.transaction.read(TABLE, order_id)
        return self._with_items(replace(header)) if header is not None else None

    def get_for_update(self, order_id: str) -> Order | None:
        self.transaction.lock(TABLE, order_id)
        return self.get(order_id)

    def list_for_customer(self, customer_id: str) -> list[Order]:
        orders = [replace(order) for order in self.transaction.rows(TABLE) if order.customer_id == customer_id]
        orders.reverse()
        orders.sort(key=lambda order: order.created_at, reverse=True)
        return [self._with_items(order) for order in orders]

    def count_items_for_product(self, product_id: str) -> int:
        return sum(1 for item in self.transaction.rows(ITEMS_TABLE) if item.product_id == product_id)
