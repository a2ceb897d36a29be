"""Order placement: command and handler.

Placement is check-all-then-commit-all. Every line is resolved and checked
against the catalog before any stock moves; only then is stock reserved on
every product and the order saved. The handler runs in one unit of work, so
a failure at any point leaves stock untouched.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.offer.validation import evaluate_offer, find_offer_by_code
from storefront.order.order import Order
from storefront.order.pricing import compute_totals, price_lines, reserved_quantities
from storefront.product.product import Product


def _as_data(value):
    return json.loads(value) if isinstance(value, str) else value


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, customizations}
    shipping_address = Text(required=True)  # JSON: address dict
    billing_address = Text()  # JSON: address dict, defaults to shipping
    payment_method = String(max_length=50)
    offer_code = String(max_length=50)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = price_lines(_as_data(command.items))

        discount = 0.0
        offer_code = None
        if command.offer_code:
            offer = find_offer_by_code(command.offer_code)
            evaluation = evaluate_offer(offer, lines, command.user_id)
            discount = evaluation.discount_amount
            offer_code = offer.code

        before = compute_totals(lines)
        # The order is never worth less than nothing
        discount = min(discount, before.subtotal + before.shipping)
        totals = compute_totals(lines, discount=discount)
        order = Order.place(
            user_id=command.user_id,
            lines=lines,
            totals=totals,
            shipping_address=_as_data(command.shipping_address),
            billing_address=_as_data(command.billing_address) if command.billing_address else None,
            payment_method=command.payment_method,
            offer_code=offer_code,
        )

        product_repo = current_domain.repository_for(Product)
        for product, quantity in reserved_quantities(lines).values():
            product.reserve_stock(quantity, order_id=order.id)
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            total=order.total,
            offer_code=offer_code,
        )
        return str(order.id)
