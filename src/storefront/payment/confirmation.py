"""Payment confirmation: the synchronous path taken by the buyer's browser.

The processor webhook (`storefront.payment.webhook`) may deliver the same
outcome before or after this runs. Both paths go through
`settle_order_payment`, which is idempotent, so they converge on one
confirmed order and one recorded offer use.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.gateway import get_gateway
from storefront.offer.offer import Offer, normalize_code
from storefront.order.order import Order, OrderStatus


def find_order_by_intent(payment_intent_id, user_id=None) -> Order | None:
    filters = {"payment_intent_id": payment_intent_id}
    if user_id is not None:
        filters["user_id"] = str(user_id)
    matches = current_domain.repository_for(Order)._dao.query.filter(**filters).all()
    return matches.items[0] if matches.items else None


def _record_offer_usage(order: Order) -> None:
    repo = current_domain.repository_for(Offer)
    matches = repo._dao.query.filter(code=normalize_code(order.offer_code)).all()
    if not matches.items:
        logger.warning("offer_missing_at_confirmation", order_id=str(order.id), code=order.offer_code)
        return

    offer = matches.items[0]
    try:
        recorded = offer.record_usage(order.user_id, order.id)
    except ValidationError as exc:
        # Payment is already captured; the discount stands and the overrun is reported
        logger.warning(
            "offer_usage_rejected",
            order_id=str(order.id),
            code=offer.code,
            errors=exc.messages,
        )
        return

    if recorded:
        repo.add(offer)
        logger.info("offer_redeemed", code=offer.code, order_id=str(order.id), usage_count=offer.usage_count)


def settle_order_payment(order: Order) -> bool:
    """Apply a successful payment to the order and count its offer, once.

    The caller persists the order.
    """
    confirmed = order.confirm_payment()
    if confirmed:
        if order.offer_code:
            _record_offer_usage(order)
        logger.info("payment_confirmed", order_id=str(order.id), payment_intent_id=order.payment_intent_id)
    elif order.status != OrderStatus.CONFIRMED.value:
        logger.error(
            "payment_received_for_closed_order",
            refund_required=True,
            order_id=str(order.id),
            status=order.status,
            payment_intent_id=order.payment_intent_id,
        )
    return confirmed


def order_summary(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "status": order.status,
        "payment_status": order.payment_status,
        "total": order.total,
    }


@storefront.command(part_of="Order")
class ConfirmPayment:
    payment_intent_id = String(required=True, max_length=255)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        intent = get_gateway().retrieve_payment_intent(command.payment_intent_id)
        if not intent.succeeded:
            raise ValidationError({"payment": ["Payment not completed"]})

        order = find_order_by_intent(command.payment_intent_id, command.user_id)
        if order is None:
            raise ObjectNotFoundError({"_entity": "Order not found"})

        settle_order_payment(order)
        current_domain.repository_for(Order).add(order)
        return order_summary(order)
