"""Payment processor port (abstract interface).

Defines the contract every processor adapter implements, so that the order
and payment handlers never talk to a processor SDK directly. FakeGateway
backs development and tests; StripeGateway backs production.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

INTENT_SUCCEEDED = "succeeded"

EVENT_PAYMENT_SUCCEEDED = "payment_intent.succeeded"
EVENT_PAYMENT_FAILED = "payment_intent.payment_failed"
EVENT_PAYMENT_CANCELED = "payment_intent.canceled"


class PaymentGatewayError(Exception):
    """The processor could not be reached or rejected the request."""


class InvalidWebhookSignature(PaymentGatewayError):
    """A webhook payload did not carry a valid processor signature."""


@dataclass(frozen=True)
class PaymentIntentResult:
    """Processor-side view of a payment intent."""

    intent_id: str
    status: str
    client_secret: str | None = None
    amount_cents: int | None = None
    metadata: dict = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == INTENT_SUCCEEDED


@dataclass(frozen=True)
class WebhookEvent:
    """A verified processor notification about a payment intent."""

    event_type: str
    intent_id: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment processor interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        idempotency_key: str | None = None,
    ) -> PaymentIntentResult:
        """Open a payment intent for the given amount in the smallest currency unit."""
        ...

    @abstractmethod
    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntentResult:
        """Fetch the current state of an intent from the processor."""
        ...

    @abstractmethod
    def parse_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """Verify a webhook's signature and decode it.

        Raises:
            InvalidWebhookSignature: the signature does not match the payload.
        """
        ...
