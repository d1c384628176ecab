"""Reading orders on behalf of customers and administrators."""

from ordering.order.order import Order
from shared.errors import Forbidden, OrderNotFound
from shared.persistence.unit_of_work import AbstractUnitOfWork


def get_order(uow: AbstractUnitOfWork, order_id: str, requester_id: str | None, is_admin: bool = False) -> Order:
    """Return an order with its items.

    Unknown ids raise ``OrderNotFound``; another customer's order raises
    ``Forbidden`` unless the requester is an administrator.
    """
    with uow:
        order = uow.orders.get(order_id)
    if order is None:
        raise OrderNotFound(details={"order_id": order_id})
    if not is_admin and not order.is_owned_by(requester_id):
        raise Forbidden("Order belongs to another customer", {"order_id": order_id})
    return order


def list_customer_orders(uow: AbstractUnitOfWork, customer_id: str) -> list[Order]:
    with uow:
        return uow.orders.list_for_customer(customer_id)
