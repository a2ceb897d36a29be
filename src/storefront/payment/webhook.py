"""Processor webhook handling: command and handler.

The signature is verified by the API layer before this command is built.
Every processor event either moves the order or is logged and acknowledged;
the processor retries anything that is not acknowledged, so unknown intents
and event types are never treated as errors.
"""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.gateway.port import EVENT_PAYMENT_CANCELED, EVENT_PAYMENT_FAILED, EVENT_PAYMENT_SUCCEEDED
from storefront.order.cancellation import release_order_stock
from storefront.order.order import Order, OrderStatus
from storefront.payment.confirmation import find_order_by_intent, settle_order_payment

OUTCOME_PROCESSED = "processed"
OUTCOME_IGNORED = "ignored"


@storefront.command(part_of="Order")
class ProcessPaymentWebhook:
    event_type = String(required=True, max_length=100)
    payment_intent_id = String(max_length=255)
    failure_reason = String(max_length=500)


@storefront.command_handler(part_of=Order)
class ProcessPaymentWebhookHandler:
    @handle(ProcessPaymentWebhook)
    def process_webhook(self, command):
        log = logger.bind(event_type=command.event_type, payment_intent_id=command.payment_intent_id)

        if command.event_type not in (EVENT_PAYMENT_SUCCEEDED, EVENT_PAYMENT_FAILED, EVENT_PAYMENT_CANCELED):
            log.info("webhook_event_ignored")
            return OUTCOME_IGNORED

        order = find_order_by_intent(command.payment_intent_id) if command.payment_intent_id else None
        if order is None:
            log.warning("webhook_order_not_found")
            return OUTCOME_IGNORED

        if command.event_type == EVENT_PAYMENT_SUCCEEDED:
            settle_order_payment(order)
        elif command.event_type == EVENT_PAYMENT_FAILED:
            if order.record_payment_failure(command.failure_reason):
                log.info("payment_failed", order_id=str(order.id), reason=command.failure_reason)
        elif OrderStatus(order.status) == OrderStatus.PENDING and not order.is_paid:
            order.fail(command.failure_reason or "Payment canceled")
            release_order_stock(order)
            log.info("order_failed", order_id=str(order.id))
        else:
            log.info("webhook_cancel_ignored", order_id=str(order.id), status=order.status)

        current_domain.repository_for(Order).add(order)
        return OUTCOME_PROCESSED
