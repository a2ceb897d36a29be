"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """An order was placed and its stock reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    subtotal = Float(required=True)
    shipping = Float(required=True)
    tax = Float(required=True)
    discount = Float(default=0.0)
    total = Float(required=True)
    offer_code = String()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentIntentAttached:
    """A processor payment intent was created to collect the order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    amount_cents = Integer(required=True)


@storefront.event(part_of="Order")
class OrderConfirmed:
    """Payment succeeded and the order is confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    payment_intent_id = String()
    total = Float(required=True)
    offer_code = String()
    confirmed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentFailed:
    """A payment attempt failed; the order remains open for another attempt."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String()
    reason = String()


@storefront.event(part_of="Order")
class OrderCancelled:
    """The buyer cancelled a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderFailed:
    """The processor gave up on the order's payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    reason = String()
    failed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentReceivedForClosedOrder:
    """Money was captured for an order that had already been cancelled or failed; it must be refunded."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    status = String(required=True)
    payment_intent_id = String()
    amount_cents = Integer(required=True)
    received_at = DateTime(required=True)
