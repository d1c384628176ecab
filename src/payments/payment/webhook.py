"""Payment webhook processing.

Applies verified gateway events to local Payments and, on success, marks
the order paid. Redelivered events leave everything as it is.
"""

from enum import Enum

import structlog

from ordering.order.status import apply_payment_success
from payments.gateway.port import PaymentGateway
from payments.payment.payment import EVENT_STATUS, PaymentStatus
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)


class WebhookOutcome(Enum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    IGNORED_EVENT = "ignored_event"
    UNKNOWN_PAYMENT = "unknown_payment"


def handle_webhook(
    uow: AbstractUnitOfWork, gateway: PaymentGateway, payload: bytes, signature: str | None
) -> WebhookOutcome:
    """Process one webhook delivery.

    The signature is verified before anything is read or written; a bad one
    raises ``InvalidSignature``. Events for payments we have no record of are
    logged and acknowledged.
    """
    event = gateway.construct_event(payload, signature)
    log = logger.bind(event_id=event.id, event_type=event.type)

    status = EVENT_STATUS.get(event.type)
    if status is None:
        log.info("webhook_event_ignored")
        return WebhookOutcome.IGNORED_EVENT

    provider_payment_id = event.data.get("id")
    if not provider_payment_id:
        log.warning("webhook_event_without_object_id")
        return WebhookOutcome.IGNORED_EVENT

    with uow:
        payment = uow.payments.get_by_provider_payment_id(provider_payment_id, for_update=True)
        if payment is None:
            log.info("webhook_unknown_payment", provider_payment_id=provider_payment_id)
            return WebhookOutcome.UNKNOWN_PAYMENT

        changed = payment.apply_status(status)
        if changed:
            uow.payments.save(payment)
        elif payment.status != status:
            log.warning(
                "webhook_status_after_final",
                payment_id=payment.id,
                current=payment.status.value,
                reported=status.value,
            )

        if payment.status == PaymentStatus.SUCCEEDED and apply_payment_success(uow, payment.order_id) is None:
            log.warning("webhook_order_missing", payment_id=payment.id, order_id=payment.order_id)
        uow.commit()

    log.info("webhook_processed", payment_id=payment.id, status=payment.status.value, changed=changed)
    return WebhookOutcome.APPLIED if changed else WebhookOutcome.UNCHANGED
