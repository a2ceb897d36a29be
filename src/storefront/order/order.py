"""Order aggregate: a priced, stock-backed purchase awaiting or holding payment.

State Machine:
    PENDING -> CONFIRMED   (payment succeeded)
    PENDING -> CANCELLED   (buyer cancelled, stock restored)
    PENDING -> FAILED      (processor cancelled the payment, stock restored)

Payment status moves independently: PENDING -> PAID, or PENDING -> FAILED and
back to PENDING when a new payment intent is created for a retry.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from shared.money import to_cents
from storefront.domain import storefront
from storefront.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderFailed,
    OrderPlaced,
    PaymentFailed,
    PaymentIntentAttached,
    PaymentReceivedForClosedOrder,
)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED, OrderStatus.FAILED},
    OrderStatus.CONFIRMED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.FAILED: set(),  # Terminal
}


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"PS-{now:%Y%m%d}-{uuid4().hex[:8].upper()}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class Address:
    """Shipping or billing address captured when the order is placed."""

    name = String(required=True, max_length=200)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(max_length=100, default="US")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line. Price and customizations are snapshots from placement time."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    customizations = Text()  # JSON: list of {name, value, additional_cost}
    line_total = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(Address, required=True)
    billing_address = ValueObject(Address)
    payment_method = String(max_length=50, default="card")
    subtotal = Float(default=0.0)
    shipping = Float(default=0.0)
    tax = Float(default=0.0)
    discount = Float(default=0.0)
    total = Float(default=0.0)
    offer_code = String(max_length=50)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_intent_id = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_balance(self):
        expected = (self.subtotal or 0.0) + (self.shipping or 0.0) + (self.tax or 0.0) - (self.discount or 0.0)
        if abs((self.total or 0.0) - expected) > 0.005:
            raise ValidationError({"total": ["Order total does not match its components"]})
        if (self.total or 0.0) < 0:
            raise ValidationError({"total": ["Order total cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        lines,
        totals,
        shipping_address,
        billing_address=None,
        payment_method=None,
        offer_code=None,
    ):
        """Create a pending order from priced lines.

        Args:
            lines: PricedLine objects from `storefront.order.pricing.price_lines`.
            totals: OrderTotals for those lines.
            shipping_address: dict of Address fields.
            billing_address: dict of Address fields; defaults to the shipping address.
        """
        now = datetime.now(UTC)
        shipping = Address(**shipping_address)
        billing = Address(**billing_address) if billing_address else shipping

        order = cls(
            order_number=generate_order_number(now),
            user_id=user_id,
            shipping_address=shipping,
            billing_address=billing,
            payment_method=payment_method or "card",
            subtotal=totals.subtotal,
            shipping=totals.shipping,
            tax=totals.tax,
            discount=totals.discount,
            total=totals.total,
            offer_code=offer_code,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=str(line.product.id),
                    name=line.product.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    customizations=json.dumps(line.customizations),
                    line_total=line.line_total,
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=str(user_id),
                items=json.dumps(order.item_quantities()),
                subtotal=order.subtotal,
                shipping=order.shipping,
                tax=order.tax,
                discount=order.discount,
                total=order.total,
                offer_code=offer_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus, message: str | None = None) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"status": [message or f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def item_quantities(self) -> list[dict]:
        return [{"product_id": str(item.product_id), "quantity": item.quantity} for item in self.items]

    @property
    def amount_in_cents(self) -> int:
        return to_cents(self.total)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def assert_payable(self) -> None:
        if self.is_paid:
            raise ValidationError({"payment_status": ["Order is already paid"]})
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": [f"Cannot pay for a {self.status} order"]})

    def attach_payment_intent(self, payment_intent_id):
        """Record the processor intent that will collect this order's total."""
        self.assert_payable()

        self.payment_intent_id = payment_intent_id
        # A fresh intent after a failed attempt starts the payment over
        self.payment_status = PaymentStatus.PENDING.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentIntentAttached(
                order_id=str(self.id),
                payment_intent_id=payment_intent_id,
                amount_cents=self.amount_in_cents,
            )
        )

    def confirm_payment(self) -> bool:
        """Apply a successful payment.

        Returns True when the order moved to CONFIRMED. Repeated confirmations
        of an already-confirmed order are a no-op. A payment landing on an
        order that was cancelled or failed in the meantime is recorded as paid
        without reopening it, and raises PaymentReceivedForClosedOrder once so
        the captured money can be refunded.
        """
        status = OrderStatus(self.status)
        if status == OrderStatus.CONFIRMED:
            return False

        now = datetime.now(UTC)
        already_paid = self.is_paid
        self.payment_status = PaymentStatus.PAID.value
        self.updated_at = now

        if status != OrderStatus.PENDING:
            if not already_paid:
                self.raise_(
                    PaymentReceivedForClosedOrder(
                        order_id=str(self.id),
                        user_id=str(self.user_id),
                        status=self.status,
                        payment_intent_id=self.payment_intent_id,
                        amount_cents=self.amount_in_cents,
                        received_at=now,
                    )
                )
            return False

        self.status = OrderStatus.CONFIRMED.value
        self.raise_(
            OrderConfirmed(
                order_id=str(self.id),
                order_number=self.order_number,
                user_id=str(self.user_id),
                payment_intent_id=self.payment_intent_id,
                total=self.total,
                offer_code=self.offer_code,
                confirmed_at=now,
            )
        )
        return True

    def record_payment_failure(self, reason=None) -> bool:
        """Mark the latest payment attempt as failed; the order stays open for a retry."""
        if self.is_paid or OrderStatus(self.status) != OrderStatus.PENDING:
            return False
        if self.payment_status == PaymentStatus.FAILED.value:
            return False

        self.payment_status = PaymentStatus.FAILED.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PaymentFailed(
                order_id=str(self.id),
                payment_intent_id=self.payment_intent_id,
                reason=reason,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Closing
    # -------------------------------------------------------------------
    def cancel(self):
        self._assert_can_transition(OrderStatus.CANCELLED, "Order cannot be cancelled")

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                user_id=str(self.user_id),
                items=json.dumps(self.item_quantities()),
                cancelled_at=now,
            )
        )

    def fail(self, reason=None):
        self._assert_can_transition(OrderStatus.FAILED)

        now = datetime.now(UTC)
        self.status = OrderStatus.FAILED.value
        self.payment_status = PaymentStatus.FAILED.value
        self.updated_at = now
        self.raise_(
            OrderFailed(
                order_id=str(self.id),
                items=json.dumps(self.item_quantities()),
                reason=reason,
                failed_at=now,
            )
        )
