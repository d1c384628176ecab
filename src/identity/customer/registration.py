"""Registering customers and checking their credentials."""

import structlog

from identity.customer.customer import Customer
from identity.customer.passwords import (
    MAX_PASSWORD_BYTES,
    MIN_PASSWORD_LENGTH,
    hash_password,
    password_too_long,
    verify_password,
)
from identity.shared.email import normalize_email
from shared.errors import Conflict, Unauthenticated, ValidationError
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)


def register_customer(uow: AbstractUnitOfWork, email: str, name: str, password: str) -> Customer:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            {"password": ["too_short"]},
        )
    if password_too_long(password):
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            {"password": ["too_long"]},
        )
    email = normalize_email(email)

    with uow:
        if uow.customers.get_by_email(email) is not None:
            raise Conflict("Email already registered", {"email": [email]})
        customer = Customer(email=email, name=name, password_hash=hash_password(password))
        uow.customers.add(customer)
        uow.commit()

    logger.info("customer_registered", customer_id=customer.id)
    return customer


def authenticate(uow: AbstractUnitOfWork, email: str, password: str) -> Customer:
    """Return the customer whose credentials match, else raise ``Unauthenticated``.

    Unknown emails and wrong passwords fail identically.
    """
    with uow:
        customer = uow.customers.get_by_email((email or "").strip())

    if customer is None or not verify_password(password or "", customer.password_hash):
        logger.info("authentication_failed")
        raise Unauthenticated("Invalid email or password")
    return customer
