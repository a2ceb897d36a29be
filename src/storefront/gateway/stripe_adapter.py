"""Stripe payment processor adapter.

Network failures and 409/429/5xx responses are retried by the SDK itself
(`stripe.max_network_retries`, exponential backoff with jitter). Intent
creation passes an idempotency key so a retried create never opens a second
intent for the same order.
"""

import stripe

from storefront.gateway.port import (
    InvalidWebhookSignature,
    PaymentGateway,
    PaymentGatewayError,
    PaymentIntentResult,
    WebhookEvent,
)


class StripeGateway(PaymentGateway):
    """Production adapter backed by the stripe-python SDK."""

    def __init__(self, api_key: str, webhook_secret: str, max_network_retries: int = 2) -> None:
        if not api_key:
            raise PaymentGatewayError("STRIPE_SECRET_KEY is not configured")
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        stripe.api_key = api_key
        stripe.max_network_retries = max_network_retries

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        idempotency_key: str | None = None,
    ) -> PaymentIntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
                idempotency_key=idempotency_key,
            )
        except stripe.StripeError as exc:
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc
        return self._to_result(intent)

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntentResult:
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id)
        except stripe.StripeError as exc:
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc
        return self._to_result(intent)

    def parse_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if not self.webhook_secret:
            raise InvalidWebhookSignature("STRIPE_WEBHOOK_SECRET is not configured")
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise InvalidWebhookSignature("Invalid webhook signature") from exc
        except ValueError as exc:
            raise InvalidWebhookSignature("Invalid webhook payload") from exc

        intent = event["data"]["object"]
        last_error = intent.get("last_payment_error") or {}
        return WebhookEvent(
            event_type=event["type"],
            intent_id=intent.get("id"),
            failure_reason=last_error.get("message"),
        )

    @staticmethod
    def _to_result(intent) -> PaymentIntentResult:
        return PaymentIntentResult(
            intent_id=intent.id,
            status=intent.status,
            client_secret=intent.client_secret,
            amount_cents=intent.amount,
            metadata=dict(intent.metadata or {}),
        )
