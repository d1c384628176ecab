"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
It can be configured at runtime to succeed or fail, making it useful for:
- Automated tests with predictable outcomes
- Development without real gateway credentials

Webhooks are accepted when the signature header equals ``signature``
(``"test-signature"`` by default); the payload is Stripe-shaped JSON:
``{"id": ..., "type": ..., "data": {"object": {...}}}``.
"""

import json
from uuid import uuid4

from payments.gateway.port import GatewayError, GatewayEvent, PaymentGateway, PaymentIntentResult
from shared.errors import InvalidSignature

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, signature: str = TEST_SIGNATURE) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.intent_status: str = "requires_payment_method"
        self.signature = signature
        self.next_intent_id: str | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Gateway unavailable",
        intent_status: str = "requires_payment_method",
        next_intent_id: str | None = None,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.intent_status = intent_status
        self.next_intent_id = next_intent_id

    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        idempotency_key: str,
        metadata: dict[str, str] | None = None,
    ) -> PaymentIntentResult:
        call = {
            "method": "create_payment_intent",
            "amount_minor": amount_minor,
            "currency": currency,
            "idempotency_key": idempotency_key,
            "metadata": dict(metadata or {}),
        }
        self.calls.append(call)

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        intent_id = self.next_intent_id or f"pi_fake_{uuid4().hex[:16]}"
        return PaymentIntentResult(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            status=self.intent_status,
        )

    def construct_event(self, payload: bytes, signature: str | None) -> GatewayEvent:
        self.calls.append({"method": "construct_event", "signature": signature})
        if signature != self.signature:
            raise InvalidSignature()
        try:
            body = json.loads(payload)
            return GatewayEvent(id=body["id"], type=body["type"], data=dict(body["data"]["object"]))
        except (ValueError, KeyError, TypeError) as exc:
            raise InvalidSignature("Malformed webhook payload") from exc
