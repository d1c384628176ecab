"""Order placement: reserve stock and record the order in one transaction.

Every product row an order touches is locked up front, in ascending product
id order, so two orders sharing products always queue in the same order and
cannot deadlock each other. Lines are then processed in the caller's order.
Either the whole order is recorded and every product decremented, or
nothing changes.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from catalogue.product.product import Product
from ordering.order.order import Order
from shared.errors import EmptyOrder, ProductNotFound, ValidationError
from shared.persistence.retry import retry_transient
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    quantity: int


def _validate(lines: Iterable[OrderLine]) -> list[OrderLine]:
    lines = list(lines)
    if not lines:
        raise EmptyOrder()
    for index, line in enumerate(lines):
        if not isinstance(line.product_id, str) or not line.product_id.strip():
            raise ValidationError("Product id is required", {"lines": {index: "product_id"}})
        quantity = line.quantity
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise ValidationError(
                "Quantity must be a positive integer",
                {"lines": {index: "quantity"}, "quantity": str(quantity)},
            )
    return lines


def _lock_products(uow: AbstractUnitOfWork, lines: list[OrderLine]) -> dict[str, Product]:
    locked = {}
    for product_id in sorted({line.product_id for line in lines}):
        product = uow.products.get_for_update(product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found", {"product_id": product_id})
        locked[product_id] = product
    return locked


@retry_transient()
def _place(uow: AbstractUnitOfWork, customer_id: str, lines: list[OrderLine], currency: str) -> Order:
    with uow:
        order = Order.open(customer_id, currency=currency)
        uow.orders.add(order)

        products = _lock_products(uow, lines)
        for line in lines:
            product = products[line.product_id]
            product.remove_stock(line.quantity)
            item = order.add_item(
                product_id=product.id,
                product_name=product.name,
                quantity=line.quantity,
                unit_price=product.price,
            )
            uow.orders.add_item(item)
            uow.products.save(product)

        order.finalize_total()
        uow.orders.save(order)
        uow.commit()
    return order


def place_order(
    uow: AbstractUnitOfWork,
    customer_id: str,
    lines: Iterable[OrderLine],
    max_attempts: int | None = None,
    currency: str = "usd",
) -> Order:
    """Place an order for ``customer_id``.

    Raises ``EmptyOrder`` or ``ValidationError`` before touching storage,
    ``ProductNotFound`` or ``InsufficientStock`` when a line cannot be
    served, ``LockTimeout`` when a product stays locked past the timeout.
    Deadlocks and serialization failures re-run the whole transaction up to
    ``max_attempts`` times and then surface as ``Conflict``.
    """
    lines = _validate(lines)
    order = _place(uow, customer_id, lines, currency, max_attempts=max_attempts)
    logger.info(
        "order_placed",
        order_id=order.id,
        customer_id=customer_id,
        items=len(order.items),
        total=str(order.total_amount),
    )
    return order
