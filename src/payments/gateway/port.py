"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class GatewayError(Exception):
    """The gateway could not be reached or refused the request."""


@dataclass(frozen=True)
class PaymentIntentResult:
    """A payment intent as created by the gateway."""

    id: str
    client_secret: str
    status: str


@dataclass(frozen=True)
class GatewayEvent:
    """A verified webhook event.

    ``data`` is the event's object, reduced to plain values; for payment
    intent events it carries at least ``id`` and ``status``.
    """

    id: str
    type: str
    data: dict[str, Any] = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        idempotency_key: str,
        metadata: dict[str, str] | None = None,
    ) -> PaymentIntentResult:
        """Create a payment intent for ``amount_minor`` (cents). Raises ``GatewayError``."""
        ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str | None) -> GatewayEvent:
        """Verify a webhook payload against its signature header and parse it.

        Raises ``InvalidSignature`` when verification fails.
        """
        ...
