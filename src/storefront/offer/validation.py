"""Checking an offer code against a cart.

Used both by the standalone `ValidateOffer` command (the storefront's "apply
code" button) and by order placement, so a code that validates here prices the
order exactly the same way.
"""

import json
from dataclasses import replace

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.offer.offer import DiscountType, Offer, OfferEvaluation, normalize_code
from storefront.order.pricing import compute_totals, price_lines, shipping_for


def find_offer_by_code(code: str) -> Offer:
    """Return the active offer for a code, or raise ObjectNotFoundError."""
    normalized = normalize_code(code)
    matches = current_domain.repository_for(Offer)._dao.query.filter(code=normalized, is_active=True).all()
    if not matches.items:
        raise ObjectNotFoundError({"_entity": "Invalid offer code"})
    return matches.items[0]


def evaluate_offer(offer: Offer, lines, user_id, now=None) -> OfferEvaluation:
    """Evaluate an offer against priced lines, raising when it does not apply.

    A free-shipping credit never exceeds the shipping the cart would be charged.
    """
    cart_items = [line.as_cart_item() for line in lines]
    cart_total = compute_totals(lines).subtotal

    evaluation = offer.evaluate(cart_items, cart_total, user_id, now=now)
    if not evaluation.valid:
        logger.info("offer_rejected", code=offer.code, user_id=str(user_id), reason=evaluation.reason)
        raise ValidationError({"offer_code": [evaluation.reason]})

    if offer.discount_type == DiscountType.FREE_SHIPPING.value:
        evaluation = replace(evaluation, discount_amount=min(evaluation.discount_amount, shipping_for(cart_total)))
    return evaluation


def offer_summary(offer: Offer) -> dict:
    return {
        "id": str(offer.id),
        "title": offer.title,
        "code": offer.code,
        "discount_type": offer.discount_type,
        "value": offer.value,
    }


@storefront.command(part_of="Offer")
class ValidateOffer:
    code = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, customizations}


@storefront.command_handler(part_of=Offer)
class ValidateOfferHandler:
    @handle(ValidateOffer)
    def validate_offer(self, command):
        items = json.loads(command.items) if isinstance(command.items, str) else command.items

        offer = find_offer_by_code(command.code)
        lines = price_lines(items, check_stock=False)
        evaluation = evaluate_offer(offer, lines, command.user_id)

        return {
            "is_valid": True,
            "discount": evaluation.discount_amount,
            "offer": offer_summary(offer),
        }
