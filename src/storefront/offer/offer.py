"""Offer aggregate: promotional codes and the rules that price them.

Evaluation is pure. It answers "what would this code take off this cart for
this user right now" without touching usage counters. Usage is recorded in a
separate step, `record_usage`, which runs only once the order's payment has
been confirmed.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from shared.clock import as_utc, utc_now
from shared.money import round_money
from storefront.domain import storefront
from storefront.offer.events import OfferCreated, OfferRedeemed

# Flat shipping fee credited by free-shipping offers
FREE_SHIPPING_CREDIT = 10.0
BOGO_RATE = 0.5

REASON_NOT_ACTIVE = "Offer has expired or is not active"
REASON_ALREADY_USED = "You have already used this offer"
REASON_NO_APPLICABLE_ITEMS = "No applicable items in cart for this offer"


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    FREE_SHIPPING = "free_shipping"
    BUY_ONE_GET_ONE = "buy_one_get_one"


class TargetAudience(Enum):
    ALL = "all"
    NEW_CUSTOMERS = "new_customers"
    RETURNING_CUSTOMERS = "returning_customers"
    VIP_CUSTOMERS = "vip_customers"


@dataclass(frozen=True)
class OfferEvaluation:
    """Outcome of pricing an offer against a cart."""

    valid: bool
    discount_amount: float = 0.0
    reason: str | None = None


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


@storefront.entity(part_of="Offer")
class Redemption:
    """One use of the offer by one user on one paid order."""

    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    used_at = DateTime(required=True)


@storefront.aggregate
class Offer:
    title = String(required=True, max_length=200)
    description = Text()
    discount_type = String(required=True, choices=DiscountType)
    value = Float(required=True, min_value=0.0)
    code = String(required=True, max_length=50)
    minimum_order_amount = Float(default=0.0, min_value=0.0)
    maximum_discount = Float(min_value=0.0)
    applicable_products = Text()  # JSON array of product ids
    applicable_categories = Text()  # JSON array of category names
    usage_limit = Integer(min_value=0)  # None means unlimited
    usage_count = Integer(default=0, min_value=0)
    user_usage_limit = Integer(default=1, min_value=1)
    redemptions = HasMany(Redemption)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    is_active = Boolean(default=True)
    is_public = Boolean(default=True)
    target_audience = String(choices=TargetAudience, default=TargetAudience.ALL.value)
    created_at = DateTime()

    @invariant.post
    def usage_cannot_exceed_limit(self):
        if self.usage_limit is not None and (self.usage_count or 0) > self.usage_limit:
            raise ValidationError({"usage_count": ["Offer usage limit exceeded"]})

    @invariant.post
    def percentage_cannot_exceed_whole(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and (self.value or 0.0) > 100:
            raise ValidationError({"value": ["Percentage discount cannot exceed 100"]})

    @invariant.post
    def window_must_be_ordered(self):
        if self.start_date and self.end_date and as_utc(self.start_date) > as_utc(self.end_date):
            raise ValidationError({"end_date": ["End date must be after start date"]})

    @classmethod
    def create(
        cls,
        title,
        code,
        discount_type,
        value,
        start_date,
        end_date,
        description=None,
        minimum_order_amount=0.0,
        maximum_discount=None,
        applicable_products=None,
        applicable_categories=None,
        usage_limit=None,
        user_usage_limit=1,
        is_public=True,
        target_audience=TargetAudience.ALL.value,
    ):
        offer = cls(
            title=title,
            description=description,
            code=normalize_code(code),
            discount_type=discount_type,
            value=value,
            minimum_order_amount=minimum_order_amount or 0.0,
            maximum_discount=maximum_discount,
            applicable_products=json.dumps([str(p) for p in applicable_products or []]),
            applicable_categories=json.dumps(list(applicable_categories or [])),
            usage_limit=usage_limit,
            usage_count=0,
            user_usage_limit=user_usage_limit or 1,
            start_date=as_utc(start_date),
            end_date=as_utc(end_date),
            is_public=is_public,
            target_audience=target_audience or TargetAudience.ALL.value,
            created_at=datetime.now(UTC),
        )
        offer.raise_(
            OfferCreated(
                offer_id=str(offer.id),
                code=offer.code,
                discount_type=offer.discount_type,
                value=offer.value,
                start_date=offer.start_date,
                end_date=offer.end_date,
            )
        )
        return offer

    @property
    def product_scope(self) -> list[str]:
        return json.loads(self.applicable_products) if self.applicable_products else []

    @property
    def category_scope(self) -> list[str]:
        return json.loads(self.applicable_categories) if self.applicable_categories else []

    # -------------------------------------------------------------------
    # Eligibility
    # -------------------------------------------------------------------
    def is_valid(self, now=None) -> bool:
        now = utc_now(now)
        if not self.is_active:
            return False
        if not as_utc(self.start_date) <= now <= as_utc(self.end_date):
            return False
        return self.usage_limit is None or (self.usage_count or 0) < self.usage_limit

    def uses_by(self, user_id) -> int:
        return sum(1 for r in self.redemptions if str(r.user_id) == str(user_id))

    def can_user_use(self, user_id, now=None) -> bool:
        if not self.is_valid(now):
            return False
        return self.uses_by(user_id) < self.user_usage_limit

    def applicable_items(self, cart_items):
        """Narrow the cart to the lines this offer covers.

        A product list takes precedence over a category list; an offer with
        neither covers the whole cart.
        """
        if self.product_scope:
            scope = set(self.product_scope)
            return [item for item in cart_items if str(item["product_id"]) in scope]
        if self.category_scope:
            scope = set(self.category_scope)
            return [item for item in cart_items if item.get("category") in scope]
        return list(cart_items)

    def evaluate(self, cart_items, cart_total, user_id, now=None) -> OfferEvaluation:
        """Price this offer against a cart without side effects.

        Args:
            cart_items: list of dicts with product_id, category, price,
                quantity and optionally line_total.
            cart_total: merchandise subtotal of the whole cart.
        """
        now = utc_now(now)

        if not self.is_valid(now):
            return OfferEvaluation(valid=False, reason=REASON_NOT_ACTIVE)
        if not self.can_user_use(user_id, now):
            return OfferEvaluation(valid=False, reason=REASON_ALREADY_USED)
        if cart_total < (self.minimum_order_amount or 0.0):
            return OfferEvaluation(
                valid=False,
                reason=f"Minimum order amount of ${self.minimum_order_amount:.2f} required",
            )

        applicable = self.applicable_items(cart_items)
        if not applicable:
            return OfferEvaluation(valid=False, reason=REASON_NO_APPLICABLE_ITEMS)

        applicable_total = sum(item.get("line_total", item["price"] * item["quantity"]) for item in applicable)

        discount_type = DiscountType(self.discount_type)
        if discount_type == DiscountType.PERCENTAGE:
            discount = min(applicable_total * self.value / 100, applicable_total)
        elif discount_type == DiscountType.FIXED_AMOUNT:
            discount = min(self.value, applicable_total)
        elif discount_type == DiscountType.FREE_SHIPPING:
            discount = FREE_SHIPPING_CREDIT
        else:
            discount = applicable_total * BOGO_RATE

        if self.maximum_discount and discount > self.maximum_discount:
            discount = self.maximum_discount

        return OfferEvaluation(valid=True, discount_amount=round_money(discount))

    # -------------------------------------------------------------------
    # Usage
    # -------------------------------------------------------------------
    def record_usage(self, user_id, order_id, now=None) -> bool:
        """Count one use of the offer for a paid order.

        Returns False when this order was already counted.
        """
        if any(str(r.order_id) == str(order_id) for r in self.redemptions):
            return False

        if self.usage_limit is not None and (self.usage_count or 0) >= self.usage_limit:
            raise ValidationError({"usage_count": ["Offer usage limit reached"]})
        if self.uses_by(user_id) >= self.user_usage_limit:
            raise ValidationError({"user_id": [REASON_ALREADY_USED]})

        used_at = utc_now(now)
        self.add_redemptions(Redemption(user_id=str(user_id), order_id=str(order_id), used_at=used_at))
        self.usage_count = (self.usage_count or 0) + 1

        self.raise_(
            OfferRedeemed(
                offer_id=str(self.id),
                code=self.code,
                user_id=str(user_id),
                order_id=str(order_id),
                usage_count=self.usage_count,
                used_at=used_at,
            )
        )
        return True
