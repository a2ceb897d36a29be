"""Payment processor factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (the default)
- StripeGateway when PAYMENT_GATEWAY=stripe
"""

import os

from storefront.gateway.fake_adapter import FakeGateway
from storefront.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def _gateway_from_env() -> PaymentGateway:
    if os.getenv("PAYMENT_GATEWAY", "fake").lower() == "stripe":
        from storefront.gateway.stripe_adapter import StripeGateway

        return StripeGateway(
            api_key=os.getenv("STRIPE_SECRET_KEY", ""),
            webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET", ""),
            max_network_retries=int(os.getenv("STRIPE_MAX_NETWORK_RETRIES", "2")),
        )
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from the environment on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _gateway_from_env()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the environment-selected gateway."""
    global _current_gateway
    _current_gateway = None


def payment_currency() -> str:
    return os.getenv("PAYMENT_CURRENCY", "usd").lower()
