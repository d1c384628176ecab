"""Creating a payment intent for a pending order.

The gateway is called outside any database transaction: a slow or failing
gateway never holds locks, and a failed call leaves nothing behind.
"""

from dataclasses import dataclass
from uuid import uuid4

import structlog

from ordering.order.order import OrderStatus
from payments.gateway.port import GatewayError, PaymentGateway
from payments.payment.payment import Payment, PaymentStatus
from shared.errors import Conflict, ExternalServiceError, Forbidden, OrderNotFound, ValidationError
from shared.money import to_minor_units
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)

_KNOWN_STATUSES = {status.value for status in PaymentStatus}


@dataclass(frozen=True)
class IntentCreated:
    payment_id: str
    provider_payment_id: str
    client_secret: str


def _initial_status(gateway_status: str) -> PaymentStatus:
    if gateway_status in _KNOWN_STATUSES:
        return PaymentStatus(gateway_status)
    # e.g. requires_capture: authorized, not yet settled
    return PaymentStatus.PROCESSING


def create_payment_intent(
    uow: AbstractUnitOfWork,
    gateway: PaymentGateway,
    order_id: str,
    requester_id: str | None = None,
    currency: str | None = None,
    provider: str = "stripe",
) -> IntentCreated:
    """Open a gateway payment intent for an order and record it as a Payment.

    ``requester_id``, when given, must own the order. The amount charged
    is always the order total. Raises ``OrderNotFound``, ``Forbidden``, ``Conflict``
    (order not pending, or provider id already recorded) and
    ``ExternalServiceError`` (gateway failure).
    """
    with uow:
        order = uow.orders.get(order_id)
    if order is None:
        raise OrderNotFound(details={"order_id": order_id})
    if requester_id is not None and not order.is_owned_by(requester_id):
        raise Forbidden("Order belongs to another customer", {"order_id": order_id})
    if order.status != OrderStatus.PENDING:
        raise Conflict(f"Cannot pay for a {order.status.value} order", {"status": order.status.value})

    amount = order.total_amount
    if amount <= 0:
        raise ValidationError("Payment amount must be positive", {"amount": [str(amount)]})
    currency = (currency or order.currency).lower()
    payment_id = str(uuid4())

    try:
        intent = gateway.create_payment_intent(
            amount_minor=to_minor_units(amount),
            currency=currency,
            idempotency_key=f"payment-{payment_id}",
            metadata={"order_id": order.id, "payment_id": payment_id},
        )
    except GatewayError as exc:
        logger.warning("payment_intent_failed", order_id=order_id, error=str(exc))
        raise ExternalServiceError("Payment gateway error", {"order_id": order_id}) from exc

    payment = Payment(
        id=payment_id,
        order_id=order.id,
        provider=provider,
        provider_payment_id=intent.id,
        amount=amount,
        currency=currency,
        status=_initial_status(intent.status),
    )
    with uow:
        uow.payments.add(payment)
        uow.commit()

    logger.info(
        "payment_intent_created",
        order_id=order_id,
        payment_id=payment.id,
        provider_payment_id=intent.id,
        amount=str(amount),
    )
    return IntentCreated(payment_id=payment.id, provider_payment_id=intent.id, client_secret=intent.client_secret)
