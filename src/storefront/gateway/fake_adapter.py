"""Configurable fake payment processor for development and testing.

Keeps intents in memory and mimics the processor's intent lifecycle without
any external calls. Tests and manual API sessions drive an intent to its
outcome with `settle_intent`, the same way a card is completed or declined
in the processor's test mode.
"""

import json
from uuid import uuid4

from storefront.gateway.port import (
    INTENT_SUCCEEDED,
    InvalidWebhookSignature,
    PaymentGateway,
    PaymentGatewayError,
    PaymentIntentResult,
    WebhookEvent,
)

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """In-memory payment processor."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.intents: dict[str, dict] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure whether new intents can be created, and the error when they cannot."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def settle_intent(self, intent_id: str, status: str = INTENT_SUCCEEDED) -> None:
        """Move an intent to a processor status, e.g. 'succeeded' or 'canceled'."""
        if intent_id not in self.intents:
            raise PaymentGatewayError(f"No such payment intent: {intent_id}")
        self.intents[intent_id]["status"] = status

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        idempotency_key: str | None = None,
    ) -> PaymentIntentResult:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount_cents": amount_cents,
                "currency": currency,
                "metadata": dict(metadata),
                "idempotency_key": idempotency_key,
            }
        )

        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason)

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        self.intents[intent_id] = {
            "status": "requires_payment_method",
            "amount": amount_cents,
            "currency": currency,
            "metadata": dict(metadata),
        }
        return self._result(intent_id, client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}")

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntentResult:
        self.calls.append({"method": "retrieve_payment_intent", "intent_id": intent_id})
        if intent_id not in self.intents:
            raise PaymentGatewayError(f"No such payment intent: {intent_id}")
        return self._result(intent_id)

    def parse_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if signature != TEST_SIGNATURE:
            raise InvalidWebhookSignature("Invalid webhook signature")

        try:
            event = json.loads(payload)
        except ValueError:
            raise InvalidWebhookSignature("Invalid webhook payload") from None

        try:
            intent = (event.get("data") or {}).get("object") or {}
            last_error = intent.get("last_payment_error") or {}
            return WebhookEvent(
                event_type=event.get("type", ""),
                intent_id=intent.get("id"),
                failure_reason=last_error.get("message"),
            )
        except AttributeError:
            raise InvalidWebhookSignature("Invalid webhook payload") from None

    def _result(self, intent_id: str, client_secret: str | None = None) -> PaymentIntentResult:
        intent = self.intents[intent_id]
        return PaymentIntentResult(
            intent_id=intent_id,
            status=intent["status"],
            client_secret=client_secret,
            amount_cents=intent["amount"],
            metadata=intent["metadata"],
        )
