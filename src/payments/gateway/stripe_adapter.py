"""Stripe payment gateway adapter.

Uses the stripe-python SDK to:
- Create PaymentIntents (amount in minor units, with an idempotency key)
- Verify webhook signatures using Stripe's signing secret
"""

import stripe
import structlog

from payments.gateway.port import GatewayError, GatewayEvent, PaymentGateway, PaymentIntentResult
from shared.errors import InvalidSignature

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str | None) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        idempotency_key: str,
        metadata: dict[str, str] | None = None,
    ) -> PaymentIntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount_minor,
                currency=currency,
                metadata=metadata or {},
                automatic_payment_methods={"enabled": True},
                idempotency_key=idempotency_key,
            )
        except stripe.StripeError as exc:
            logger.warning("stripe_intent_failed", error=str(exc), code=getattr(exc, "code", None))
            raise GatewayError(str(exc)) from exc
        return PaymentIntentResult(id=intent.id, client_secret=intent.client_secret, status=intent.status)

    def construct_event(self, payload: bytes, signature: str | None) -> GatewayEvent:
        if not self.webhook_secret:
            raise InvalidSignature("Webhook signing secret is not configured")
        if not signature:
            raise InvalidSignature("Missing Stripe-Signature header")
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise InvalidSignature() from exc
        except ValueError as exc:
            raise InvalidSignature("Malformed webhook payload") from exc

        obj = event.data.object
        data = {
            "id": getattr(obj, "id", None),
            "object": getattr(obj, "object", None),
            "status": getattr(obj, "status", None),
        }
        return GatewayEvent(id=event.id, type=event.type, data=data)
