"""Order aggregate: the record of a purchase and its line items.

Each OrderItem snapshots the product's name and unit price at placement, so
later repricing never changes what a customer was charged. The order total
is the exact decimal sum of its item subtotals.

State Machine:
    PENDING → PAID → SHIPPED → DELIVERED
    PENDING → CANCELED
    PAID → CANCELED
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from shared.errors import ValidationError
from shared.money import ZERO, to_money


def _new_id() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELED = "canceled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELED},
    OrderStatus.PAID: {OrderStatus.SHIPPED, OrderStatus.CANCELED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELED: set(),  # Terminal
}


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown order status: {value!r}", {"status": [str(value)]}) from None


@dataclass
class OrderItem:
    order_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        self.unit_price = to_money(self.unit_price)
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool) or self.quantity <= 0:
            raise ValidationError("Quantity must be a positive integer", {"quantity": [str(self.quantity)]})

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Order:
    customer_id: str
    currency: str = "usd"
    status: OrderStatus = OrderStatus.PENDING
    total_amount: Decimal = ZERO
    items: list[OrderItem] = field(default_factory=list)
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        self.total_amount = to_money(self.total_amount)
        if isinstance(self.status, str):
            self.status = parse_status(self.status)

    @classmethod
    def open(cls, customer_id: str, currency: str = "usd") -> "Order":
        """Start a pending order with no items and a zero total."""
        return cls(customer_id=customer_id, currency=currency)

    # -------------------------------------------------------------------
    # Items and totals
    # -------------------------------------------------------------------
    def add_item(self, product_id: str, product_name: str, quantity: int, unit_price: Decimal) -> OrderItem:
        if self.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Cannot add items to a {self.status.value} order", {"status": [self.status.value]}
            )
        item = OrderItem(
            order_id=self.id,
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            unit_price=unit_price,
        )
        self.items.append(item)
        return item

    def items_total(self) -> Decimal:
        return sum((item.subtotal for item in self.items), ZERO)

    def finalize_total(self) -> None:
        self.total_amount = to_money(self.items_total())
        self.updated_at = _now()

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def transition_to(self, target: OrderStatus) -> None:
        if target not in _VALID_TRANSITIONS[self.status]:
            raise ValidationError(
                f"Cannot transition from {self.status.value} to {target.value}",
                {"status": [f"{self.status.value} -> {target.value}"]},
            )
        self.status = target
        self.updated_at = _now()

    def mark_paid(self) -> bool:
        """Move to PAID. Returns False when the order already was paid."""
        if self.status == OrderStatus.PAID:
            return False
        self.transition_to(OrderStatus.PAID)
        return True

    def can_be_cancelled(self) -> bool:
        """Whether the customer may still cancel (only before payment)."""
        return self.status == OrderStatus.PENDING

    def cancel(self) -> None:
        self.transition_to(OrderStatus.CANCELED)

    def is_owned_by(self, customer_id: str) -> bool:
        return self.customer_id == customer_id
