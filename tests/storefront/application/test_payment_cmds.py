"""Application tests for the payment bridge: intents, confirmation and webhooks."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.gateway.port import (
    EVENT_PAYMENT_CANCELED,
    EVENT_PAYMENT_FAILED,
    EVENT_PAYMENT_SUCCEEDED,
    PaymentGatewayError,
)
from storefront.offer.offer import Offer
from storefront.order.order import Order, OrderStatus, PaymentStatus
from storefront.payment.confirmation import ConfirmPayment
from storefront.payment.intent import CreatePaymentIntent
from storefront.payment.webhook import OUTCOME_IGNORED, OUTCOME_PROCESSED, ProcessPaymentWebhook
from storefront.product.product import Product


def _create_intent(order_id, user_id="user-001"):
    return current_domain.process(CreatePaymentIntent(order_id=order_id, user_id=user_id), asynchronous=False)


def _confirm(intent_id, user_id="user-001"):
    return current_domain.process(ConfirmPayment(payment_intent_id=intent_id, user_id=user_id), asynchronous=False)


def _webhook(event_type, intent_id, failure_reason=None):
    command = ProcessPaymentWebhook(event_type=event_type, payment_intent_id=intent_id, failure_reason=failure_reason)
    return current_domain.process(command, asynchronous=False)


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


@pytest.fixture()
def placed_order(make_product, order_placer):
    product_id = make_product(price=12.50, stock=10)
    return order_placer([{"product_id": product_id, "quantity": 3}])


class TestCreatePaymentIntent:
    def test_intent_for_order_total_in_cents(self, placed_order, gateway):
        result = _create_intent(placed_order)

        assert result["payment_intent_id"].startswith("pi_fake_")
        assert result["client_secret"]
        call = gateway.calls[-1]
        assert call["amount_cents"] == 5050
        assert call["currency"] == "usd"
        assert call["metadata"]["order_id"] == placed_order
        assert call["idempotency_key"] == f"order-{placed_order}-initial"
        assert _order(placed_order).payment_intent_id == result["payment_intent_id"]

    def test_retry_uses_new_idempotency_key(self, placed_order, gateway):
        first = _create_intent(placed_order)["payment_intent_id"]
        _create_intent(placed_order)
        assert gateway.calls[-1]["idempotency_key"] == f"order-{placed_order}-{first}"

    def test_gateway_failure_leaves_order_untouched(self, placed_order, gateway):
        gateway.configure(should_succeed=False, failure_reason="Processor unavailable")

        with pytest.raises(PaymentGatewayError):
            _create_intent(placed_order)

        assert _order(placed_order).payment_intent_id is None

    def test_paid_order_rejected(self, placed_order, gateway):
        intent_id = _create_intent(placed_order)["payment_intent_id"]
        gateway.settle_intent(intent_id)
        _confirm(intent_id)

        with pytest.raises(ValidationError):
            _create_intent(placed_order)

    def test_other_users_order_rejected(self, placed_order):
        with pytest.raises(ObjectNotFoundError):
            _create_intent(placed_order, user_id="intruder")


class TestConfirmPayment:
    def test_confirm_succeeded_intent(self, placed_order, gateway):
        intent_id = _create_intent(placed_order)["payment_intent_id"]
        gateway.settle_intent(intent_id)

        summary = _confirm(intent_id)

        assert summary["status"] == OrderStatus.CONFIRMED.value
        assert summary["payment_status"] == PaymentStatus.PAID.value
        assert summary["total"] == 50.50

    def test_unsettled_intent_not_confirmed(self, placed_order):
        intent_id = _create_intent(placed_order)["payment_intent_id"]

        with pytest.raises(ValidationError) as exc:
            _confirm(intent_id)

        assert exc.value.messages["payment"] == ["Payment not completed"]
        assert _order(placed_order).status == OrderStatus.PENDING.value

    def test_confirm_is_idempotent(self, placed_order, gateway):
        intent_id = _create_intent(placed_order)["payment_intent_id"]
        gateway.settle_intent(intent_id)

        _confirm(intent_id)
        summary = _confirm(intent_id)

        assert summary["status"] == OrderStatus.CONFIRMED.value

    def test_unknown_order(self, gateway, placed_order):
        intent_id = _create_intent(placed_order)["payment_intent_id"]
        gateway.settle_intent(intent_id)
        with pytest.raises(ObjectNotFoundError):
            _confirm(intent_id, user_id="intruder")


class TestOfferUsageOnPayment:
    @pytest.fixture()
    def offer_order(self, make_product, make_offer, order_placer):
        product_id = make_product(price=12.50, stock=10)
        offer_id = make_offer(code="WELCOME20", usage_limit=5)
        order_id = order_placer([{"product_id": product_id, "quantity": 3}], offer_code="WELCOME20")
        return offer_id, order_id

    def test_usage_recorded_once_across_confirm_and_webhook(self, offer_order, gateway):
        offer_id, order_id = offer_order
        intent_id = _create_intent(order_id)["payment_intent_id"]
        gateway.settle_intent(intent_id)

        _confirm(intent_id)
        _webhook(EVENT_PAYMENT_SUCCEEDED, intent_id)
        _confirm(intent_id)

        offer = current_domain.repository_for(Offer).get(offer_id)
        assert offer.usage_count == 1
        assert offer.uses_by("user-001") == 1

    def test_usage_recorded_via_webhook_alone(self, offer_order, gateway):
        offer_id, order_id = offer_order
        intent_id = _create_intent(order_id)["payment_intent_id"]

        _webhook(EVENT_PAYMENT_SUCCEEDED, intent_id)

        assert current_domain.repository_for(Offer).get(offer_id).usage_count == 1
        assert _order(order_id).status == OrderStatus.CONFIRMED.value

    def test_exhausted_offer_does_not_block_payment(self, make_product, make_offer, order_placer, gateway):
        product_id = make_product(price=12.50, stock=10)
        offer_id = make_offer(code="ONESHOT", usage_limit=1)
        first = order_placer([{"product_id": product_id, "quantity": 1}], user_id="user-a", offer_code="ONESHOT")
        second = order_placer([{"product_id": product_id, "quantity": 1}], user_id="user-b", offer_code="ONESHOT")

        for order_id, user_id in ((first, "user-a"), (second, "user-b")):
            intent_id = _create_intent(order_id, user_id=user_id)["payment_intent_id"]
            gateway.settle_intent(intent_id)
            _confirm(intent_id, user_id=user_id)

        assert _order(second).status == OrderStatus.CONFIRMED.value
        assert current_domain.repository_for(Offer).get(offer_id).usage_count == 1


class TestPaymentWebhook:
    def test_succeeded_confirms_order(self, placed_order):
        intent_id = _create_intent(placed_order)["payment_intent_id"]

        assert _webhook(EVENT_PAYMENT_SUCCEEDED, intent_id) == OUTCOME_PROCESSED

        assert _order(placed_order).status == OrderStatus.CONFIRMED.value

    def test_duplicate_succeeded_is_harmless(self, placed_order):
        intent_id = _create_intent(placed_order)["payment_intent_id"]
        _webhook(EVENT_PAYMENT_SUCCEEDED, intent_id)

        assert _webhook(EVENT_PAYMENT_SUCCEEDED, intent_id) == OUTCOME_PROCESSED
        assert _order(placed_order).status == OrderStatus.CONFIRMED.value

    def test_payment_failed_keeps_order_pending(self, placed_order):
        intent_id = _create_intent(placed_order)["payment_intent_id"]

        _webhook(EVENT_PAYMENT_FAILED, intent_id, failure_reason="Your card was declined.")

        order = _order(placed_order)
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.FAILED.value

    def test_canceled_fails_order_and_restores_stock(self, make_product, order_placer):
        product_id = make_product(stock=10)
        order_id = order_placer([{"product_id": product_id, "quantity": 4}])
        intent_id = _create_intent(order_id)["payment_intent_id"]

        _webhook(EVENT_PAYMENT_CANCELED, intent_id)

        assert _order(order_id).status == OrderStatus.FAILED.value
        assert current_domain.repository_for(Product).get(product_id).stock == 10

    def test_canceled_after_payment_is_ignored(self, placed_order):
        intent_id = _create_intent(placed_order)["payment_intent_id"]
        _webhook(EVENT_PAYMENT_SUCCEEDED, intent_id)

        _webhook(EVENT_PAYMENT_CANCELED, intent_id)

        assert _order(placed_order).status == OrderStatus.CONFIRMED.value

    def test_success_on_cancelled_order_is_kept_for_refund(self, placed_order):
        from storefront.order.cancellation import CancelOrder

        intent_id = _create_intent(placed_order)["payment_intent_id"]
        current_domain.process(CancelOrder(order_id=placed_order, user_id="user-001"), asynchronous=False)

        assert _webhook(EVENT_PAYMENT_SUCCEEDED, intent_id) == OUTCOME_PROCESSED

        order = _order(placed_order)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.payment_status == PaymentStatus.PAID.value

    def test_unknown_intent_ignored(self):
        assert _webhook(EVENT_PAYMENT_SUCCEEDED, "pi_unknown") == OUTCOME_IGNORED

    def test_unrelated_event_type_ignored(self, placed_order):
        intent_id = _create_intent(placed_order)["payment_intent_id"]
        assert _webhook("charge.refunded", intent_id) == OUTCOME_IGNORED
        assert _order(placed_order).status == OrderStatus.PENDING.value
