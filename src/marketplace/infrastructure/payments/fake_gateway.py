"""Configurable fake payment gateway for development and testing.

Simulates a payment-intent service without any external calls.  It can
be configured at runtime to fail, records every call it receives, and
signs notification payloads with HMAC-SHA256 the way a real gateway
signs its webhooks.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from uuid import uuid4

import structlog

from marketplace.domain.exceptions import PaymentServiceError
from marketplace.domain.service.payment_gateway import PaymentGateway, PaymentIntent

logger = structlog.get_logger(__name__)


class FakePaymentGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, webhook_secret: str = "whsec_test") -> None:
        self._webhook_secret = webhook_secret.encode("utf-8")
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment service unavailable"
        self.intents: dict[str, PaymentIntent] = {}
        self.calls: list[dict] = []

    def configure(
        self, should_succeed: bool, failure_reason: str = "Payment service unavailable"
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    # --- PaymentGateway interface ---------------------------------------------

    def create_intent(self, amount: int, currency: str) -> PaymentIntent:
        self.calls.append({"method": "create_intent", "amount": amount, "currency": currency})
        self._fail_if_configured()

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            amount=amount,
            currency=currency,
        )
        self.intents[intent_id] = intent
        logger.info("Payment intent created", intent_id=intent_id, amount=amount)
        return intent

    def update_intent(self, intent_id: str, amount: int) -> PaymentIntent:
        self.calls.append({"method": "update_intent", "intent_id": intent_id, "amount": amount})
        self._fail_if_configured()

        existing = self.intents.get(intent_id)
        if existing is None and intent_id.startswith("pi_fake_"):
            # Issued by an earlier process; the fake keeps no state between runs.
            existing = PaymentIntent(intent_id, f"{intent_id}_secret", amount, "usd")
        if existing is None:
            raise PaymentServiceError(f"No such payment intent: '{intent_id}'")
        intent = PaymentIntent(
            id=existing.id,
            client_secret=existing.client_secret,
            amount=amount,
            currency=existing.currency,
        )
        self.intents[intent_id] = intent
        logger.info("Payment intent updated", intent_id=intent_id, amount=amount)
        return intent

    def verify_signature(self, payload: str, signature: str) -> bool:
        return hmac.compare_digest(self.sign(payload), signature)

    # --- Test helpers ---------------------------------------------------------

    def sign(self, payload: str) -> str:
        return hmac.new(self._webhook_secret, payload.encode("utf-8"), hashlib.sha256).hexdigest()

    def event_payload(self, intent_id: str, succeeded: bool = True) -> str:
        """Build the JSON body the gateway would post for an intent outcome."""
        event_type = (
            "payment_intent.succeeded" if succeeded else "payment_intent.payment_failed"
        )
        return json.dumps(
            {
                "id": f"evt_fake_{uuid4().hex[:12]}",
                "type": event_type,
                "data": {"object": {"id": intent_id}},
            }
        )

    def _fail_if_configured(self) -> None:
        if not self.should_succeed:
            raise PaymentServiceError(self.failure_reason)
