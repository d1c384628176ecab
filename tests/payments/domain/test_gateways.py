"""Tests for the fake and Stripe gateway adapters."""

import hashlib
import hmac
import json
import time
from types import SimpleNamespace

import pytest
import stripe
from payments.gateway import FakeGateway, StripeGateway, get_gateway, reset_gateway, set_gateway
from payments.gateway.port import GatewayError
from shared.config import get_settings
from shared.errors import InvalidSignature

WEBHOOK_SECRET = "whsec_test_secret"


def _event_payload(event_type="payment_intent.succeeded", intent_id="pi_123"):
    return json.dumps(
        {
            "id": "evt_1",
            "object": "event",
            "type": event_type,
            "data": {"object": {"id": intent_id, "object": "payment_intent", "status": "succeeded"}},
        }
    ).encode()


def _stripe_signature(payload, secret=WEBHOOK_SECRET, timestamp=None):
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload.decode()}".encode()
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


class TestFakeGateway:
    def test_creates_intents_and_records_calls(self):
        gateway = FakeGateway()
        intent = gateway.create_payment_intent(2550, "usd", "key-1", {"order_id": "o1"})
        assert intent.id.startswith("pi_fake_")
        assert intent.client_secret.startswith(intent.id)
        assert gateway.calls[0]["amount_minor"] == 2550

    def test_configured_failure(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Stripe is down")
        with pytest.raises(GatewayError, match="Stripe is down"):
            gateway.create_payment_intent(100, "usd", "key-1")

    def test_construct_event(self):
        event = FakeGateway().construct_event(_event_payload(), "test-signature")
        assert event.type == "payment_intent.succeeded"
        assert event.data["id"] == "pi_123"

    def test_wrong_signature(self):
        with pytest.raises(InvalidSignature):
            FakeGateway().construct_event(_event_payload(), "forged")

    def test_malformed_payload(self):
        with pytest.raises(InvalidSignature):
            FakeGateway().construct_event(b"not json", "test-signature")


class TestStripeGateway:
    def test_create_payment_intent(self, monkeypatch):
        captured = {}

        def create(**kwargs):
            captured.update(kwargs)
            return SimpleNamespace(id="pi_live_1", client_secret="pi_live_1_secret", status="requires_payment_method")

        monkeypatch.setattr(stripe.PaymentIntent, "create", create)
        gateway = StripeGateway("sk_test_key", WEBHOOK_SECRET)

        intent = gateway.create_payment_intent(2550, "usd", "payment-abc", {"order_id": "o1"})

        assert intent.id == "pi_live_1"
        assert captured["amount"] == 2550
        assert captured["idempotency_key"] == "payment-abc"
        assert captured["api_key"] == "sk_test_key"
        assert captured["automatic_payment_methods"] == {"enabled": True}

    def test_stripe_errors_become_gateway_errors(self, monkeypatch):
        def create(**kwargs):
            raise stripe.StripeError("card network unreachable")

        monkeypatch.setattr(stripe.PaymentIntent, "create", create)
        with pytest.raises(GatewayError):
            StripeGateway("sk_test_key", WEBHOOK_SECRET).create_payment_intent(100, "usd", "payment-abc")

    def test_verifies_real_signatures(self):
        payload = _event_payload()
        event = StripeGateway("sk_test_key", WEBHOOK_SECRET).construct_event(payload, _stripe_signature(payload))
        assert event.id == "evt_1"
        assert event.type == "payment_intent.succeeded"
        assert event.data["id"] == "pi_123"

    def test_rejects_signature_from_another_secret(self):
        payload = _event_payload()
        with pytest.raises(InvalidSignature):
            StripeGateway("sk_test_key", WEBHOOK_SECRET).construct_event(
                payload, _stripe_signature(payload, secret="whsec_other")
            )

    def test_rejects_tampered_payload(self):
        payload = _event_payload()
        signature = _stripe_signature(payload)
        with pytest.raises(InvalidSignature):
            StripeGateway("sk_test_key", WEBHOOK_SECRET).construct_event(_event_payload(intent_id="pi_999"), signature)

    def test_missing_signature_or_secret(self):
        payload = _event_payload()
        with pytest.raises(InvalidSignature):
            StripeGateway("sk_test_key", WEBHOOK_SECRET).construct_event(payload, None)
        with pytest.raises(InvalidSignature):
            StripeGateway("sk_test_key", None).construct_event(payload, _stripe_signature(payload))


class TestGatewayFactory:
    def test_defaults_to_fake_without_stripe_key(self, monkeypatch):
        monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
        get_settings.cache_clear()
        reset_gateway()
        assert isinstance(get_gateway(), FakeGateway)

    def test_uses_stripe_with_a_key(self, monkeypatch):
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_key")
        get_settings.cache_clear()
        reset_gateway()
        assert isinstance(get_gateway(), StripeGateway)

    def test_set_gateway(self):
        gateway = FakeGateway()
        set_gateway(gateway)
        assert get_gateway() is gateway
