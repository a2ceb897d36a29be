"""Payment intent creation: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.gateway import get_gateway, payment_currency
from storefront.order.cancellation import get_order_for_user
from storefront.order.order import Order


@storefront.command(part_of="Order")
class CreatePaymentIntent:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CreatePaymentIntentHandler:
    @handle(CreatePaymentIntent)
    def create_payment_intent(self, command):
        order = get_order_for_user(command.order_id, command.user_id)
        order.assert_payable()

        # A new key per attempt: the processor replays the same intent for a repeated key
        attempt = order.payment_intent_id or "initial"
        intent = get_gateway().create_payment_intent(
            amount_cents=order.amount_in_cents,
            currency=payment_currency(),
            metadata={
                "order_id": str(order.id),
                "user_id": str(order.user_id),
                "order_number": order.order_number,
            },
            idempotency_key=f"order-{order.id}-{attempt}",
        )

        order.attach_payment_intent(intent.intent_id)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "payment_intent_created",
            order_id=str(order.id),
            payment_intent_id=intent.intent_id,
            amount_cents=order.amount_in_cents,
        )
        return {"client_secret": intent.client_secret, "payment_intent_id": intent.intent_id}
