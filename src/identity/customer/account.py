"""Administrative account operations."""

import structlog

from identity.customer.customer import Customer, parse_role
from shared.errors import NotFound
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)


def get_customer(uow: AbstractUnitOfWork, customer_id: str) -> Customer:
    with uow:
        customer = uow.customers.get(customer_id)
    if customer is None:
        raise NotFound("Customer not found", {"customer_id": customer_id})
    return customer


def list_customers(uow: AbstractUnitOfWork) -> list[Customer]:
    with uow:
        return uow.customers.list()


def update_role(uow: AbstractUnitOfWork, customer_id: str, role: str) -> Customer:
    new_role = parse_role(role)
    with uow:
        customer = uow.customers.get(customer_id)
        if customer is None:
            raise NotFound("Customer not found", {"customer_id": customer_id})
        customer.change_role(new_role)
        uow.customers.save(customer)
        uow.commit()

    logger.info("customer_role_updated", customer_id=customer_id, role=new_role.value)
    return customer
