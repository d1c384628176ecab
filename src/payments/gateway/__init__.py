"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- StripeGateway when STRIPE_SECRET_KEY is configured
- FakeGateway for development and testing otherwise
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import GatewayError, GatewayEvent, PaymentGateway, PaymentIntentResult
from payments.gateway.stripe_adapter import StripeGateway
from shared.config import get_settings

__all__ = [
    "FakeGateway",
    "GatewayError",
    "GatewayEvent",
    "PaymentGateway",
    "PaymentIntentResult",
    "StripeGateway",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building the default on first use."""
    global _current_gateway
    if _current_gateway is None:
        settings = get_settings()
        if settings.stripe_secret_key:
            _current_gateway = StripeGateway(settings.stripe_secret_key, settings.stripe_webhook_secret)
        else:
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
