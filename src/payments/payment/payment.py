"""Payment record: one gateway payment intent for one order.

The status mirrors the gateway's payment intent lifecycle. It changes only
through webhook events (or the gateway's answer at creation), and
``succeeded`` and ``canceled`` are final.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from shared.errors import ValidationError
from shared.money import to_money


def _now() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentStatus(Enum):
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_ACTION = "requires_action"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


_FINAL_STATUSES = {PaymentStatus.SUCCEEDED, PaymentStatus.CANCELED}

# Webhook event types acted upon, and the status each one sets
EVENT_STATUS = {
    "payment_intent.succeeded": PaymentStatus.SUCCEEDED,
    "payment_intent.payment_failed": PaymentStatus.FAILED,
    "payment_intent.canceled": PaymentStatus.CANCELED,
}


def parse_payment_status(value: str) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown payment status: {value!r}", {"status": [str(value)]}) from None


@dataclass
class Payment:
    order_id: str
    provider_payment_id: str
    amount: Decimal
    currency: str
    provider: str = "stripe"
    status: PaymentStatus = PaymentStatus.REQUIRES_PAYMENT_METHOD
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        self.amount = to_money(self.amount)
        if isinstance(self.status, str):
            self.status = parse_payment_status(self.status)

    @property
    def is_final(self) -> bool:
        return self.status in _FINAL_STATUSES

    def apply_status(self, status: PaymentStatus) -> bool:
        """Record a status reported by the gateway.

        Returns False when nothing changed: the status is the same, or the
        payment already reached a final status.
        """
        if status == self.status or self.is_final:
            return False
        self.status = status
        self.updated_at = _now()
        return True
