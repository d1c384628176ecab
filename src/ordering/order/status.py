"""Order status changes after placement.

Cancellation does not put stock back; stock moves only through placement and
the admin restock.
"""

import structlog

from ordering.order.order import Order, OrderStatus, parse_status
from shared.errors import Forbidden, OrderNotFound, ValidationError
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)


def _load_for_update(uow: AbstractUnitOfWork, order_id: str) -> Order:
    order = uow.orders.get_for_update(order_id)
    if order is None:
        raise OrderNotFound(details={"order_id": order_id})
    return order


def cancel_order(uow: AbstractUnitOfWork, order_id: str, requester_id: str) -> Order:
    """Customer cancellation, allowed only while the order is pending."""
    with uow:
        order = _load_for_update(uow, order_id)
        if not order.is_owned_by(requester_id):
            raise Forbidden("Order belongs to another customer", {"order_id": order_id})
        if not order.can_be_cancelled():
            raise ValidationError(
                f"A {order.status.value} order can no longer be canceled", {"status": [order.status.value]}
            )
        order.cancel()
        uow.orders.save(order)
        uow.commit()

    logger.info("order_canceled", order_id=order_id, by="customer")
    return order


def update_order_status(uow: AbstractUnitOfWork, order_id: str, status: str) -> Order:
    target = parse_status(status)
    with uow:
        order = _load_for_update(uow, order_id)
        previous = order.status
        order.transition_to(target)
        uow.orders.save(order)
        uow.commit()

    logger.info("order_status_updated", order_id=order_id, previous=previous.value, status=target.value)
    return order


def mark_order_paid(uow: AbstractUnitOfWork, order_id: str) -> Order:
    """Set the order to paid; a second call leaves it unchanged."""
    with uow:
        order = _load_for_update(uow, order_id)
        if order.mark_paid():
            uow.orders.save(order)
            uow.commit()
            logger.info("order_paid", order_id=order_id)
    return order


def apply_payment_success(uow: AbstractUnitOfWork, order_id: str) -> Order | None:
    """Mark an order paid inside the caller's open transaction.

    Returns the order, or None when it does not exist. A canceled order is
    left as it is.
    """
    order = uow.orders.get_for_update(order_id)
    if order is None:
        return None
    if order.status == OrderStatus.CANCELED:
        logger.warning("payment_succeeded_for_canceled_order", order_id=order_id)
        return order
    if order.status == OrderStatus.PENDING:
        order.mark_paid()
        uow.orders.save(order)
    return order
