"""Domain tests for offer eligibility and discount computation."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.offer.offer import (
    FREE_SHIPPING_CREDIT,
    REASON_ALREADY_USED,
    REASON_NO_APPLICABLE_ITEMS,
    REASON_NOT_ACTIVE,
    DiscountType,
    Offer,
    normalize_code,
)

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def _offer(**overrides):
    defaults = {
        "title": "Summer Sale",
        "code": "summer20",
        "discount_type": DiscountType.PERCENTAGE.value,
        "value": 20,
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=1),
    }
    defaults.update(overrides)
    return Offer.create(**defaults)


def _item(product_id="p-1", price=12.50, quantity=3, category="business-cards"):
    return {
        "product_id": product_id,
        "category": category,
        "price": price,
        "quantity": quantity,
        "line_total": price * quantity,
    }


class TestOfferCreation:
    def test_code_is_normalized(self):
        offer = _offer(code="  summer20 ")
        assert offer.code == "SUMMER20"
        assert normalize_code(" welcome20") == "WELCOME20"

    def test_window_must_be_ordered(self):
        with pytest.raises(ValidationError) as exc:
            _offer(start_date=NOW, end_date=NOW - timedelta(days=1))
        assert "end_date" in exc.value.messages

    def test_usage_starts_at_zero(self):
        offer = _offer(usage_limit=10)
        assert offer.usage_count == 0
        assert offer.redemptions == []


class TestValidity:
    def test_valid_inside_window(self):
        assert _offer().is_valid(NOW) is True

    def test_invalid_before_start(self):
        assert _offer().is_valid(NOW - timedelta(days=2)) is False

    def test_invalid_after_end(self):
        assert _offer().is_valid(NOW + timedelta(days=2)) is False

    def test_invalid_when_inactive(self):
        offer = _offer()
        offer.is_active = False
        assert offer.is_valid(NOW) is False

    def test_invalid_when_usage_limit_reached(self):
        offer = _offer(usage_limit=1)
        offer.record_usage("user-a", "order-a", now=NOW)
        assert offer.is_valid(NOW) is False

    def test_user_limit(self):
        offer = _offer(user_usage_limit=1)
        offer.record_usage("user-a", "order-a", now=NOW)
        assert offer.can_user_use("user-a", NOW) is False
        assert offer.can_user_use("user-b", NOW) is True


class TestDiscounts:
    def test_percentage_discount(self):
        result = _offer().evaluate([_item()], 37.50, "user-a", now=NOW)
        assert result.valid is True
        assert result.discount_amount == 7.50

    def test_percentage_capped_by_maximum(self):
        result = _offer(maximum_discount=5).evaluate([_item()], 37.50, "user-a", now=NOW)
        assert result.discount_amount == 5.00

    def test_fixed_amount_never_exceeds_applicable_total(self):
        offer = _offer(discount_type=DiscountType.FIXED_AMOUNT.value, value=50)
        result = offer.evaluate([_item(price=10.0, quantity=2)], 20.0, "user-a", now=NOW)
        assert result.discount_amount == 20.0

    def test_fixed_amount(self):
        offer = _offer(discount_type=DiscountType.FIXED_AMOUNT.value, value=15)
        assert offer.evaluate([_item()], 37.50, "user-a", now=NOW).discount_amount == 15.0

    def test_free_shipping_credit(self):
        offer = _offer(discount_type=DiscountType.FREE_SHIPPING.value, value=0)
        assert offer.evaluate([_item()], 37.50, "user-a", now=NOW).discount_amount == FREE_SHIPPING_CREDIT

    def test_buy_one_get_one_halves_applicable_total(self):
        offer = _offer(discount_type=DiscountType.BUY_ONE_GET_ONE.value, value=0)
        result = offer.evaluate([_item(price=20.0, quantity=2)], 40.0, "user-a", now=NOW)
        assert result.discount_amount == 20.0

    def test_discount_rounded_half_up(self):
        offer = _offer(value=10)
        result = offer.evaluate([_item(price=0.45, quantity=1)], 0.45, "user-a", now=NOW)
        assert result.discount_amount == 0.05


class TestScope:
    def test_product_scope_limits_discount_base(self):
        offer = _offer(applicable_products=["p-1"])
        items = [_item("p-1", price=10.0, quantity=1), _item("p-2", price=90.0, quantity=1)]
        assert offer.evaluate(items, 100.0, "user-a", now=NOW).discount_amount == 2.0

    def test_category_scope_limits_discount_base(self):
        offer = _offer(applicable_categories=["banners"])
        items = [
            _item("p-1", price=50.0, quantity=1, category="banners"),
            _item("p-2", price=50.0, quantity=1, category="labels"),
        ]
        assert offer.evaluate(items, 100.0, "user-a", now=NOW).discount_amount == 10.0

    def test_product_scope_wins_over_category_scope(self):
        offer = _offer(applicable_products=["p-2"], applicable_categories=["banners"])
        items = [
            _item("p-1", price=50.0, quantity=1, category="banners"),
            _item("p-2", price=30.0, quantity=1, category="labels"),
        ]
        assert offer.evaluate(items, 80.0, "user-a", now=NOW).discount_amount == 6.0

    def test_no_applicable_items(self):
        offer = _offer(applicable_products=["p-9"])
        result = offer.evaluate([_item()], 37.50, "user-a", now=NOW)
        assert result.valid is False
        assert result.reason == REASON_NO_APPLICABLE_ITEMS


class TestRejections:
    def test_expired_offer(self):
        result = _offer().evaluate([_item()], 37.50, "user-a", now=NOW + timedelta(days=5))
        assert result.valid is False
        assert result.reason == REASON_NOT_ACTIVE
        assert result.discount_amount == 0.0

    def test_already_used(self):
        offer = _offer()
        offer.record_usage("user-a", "order-a", now=NOW)
        result = offer.evaluate([_item()], 37.50, "user-a", now=NOW)
        assert result.reason == REASON_ALREADY_USED

    def test_minimum_order_amount(self):
        result = _offer(minimum_order_amount=50).evaluate([_item()], 37.50, "user-a", now=NOW)
        assert result.valid is False
        assert result.reason == "Minimum order amount of $50.00 required"

    def test_minimum_checked_before_scope(self):
        offer = _offer(minimum_order_amount=50, applicable_products=["p-9"])
        result = offer.evaluate([_item()], 37.50, "user-a", now=NOW)
        assert result.reason.startswith("Minimum order amount")

    def test_evaluation_has_no_side_effects(self):
        offer = _offer(usage_limit=1)
        offer.evaluate([_item()], 37.50, "user-a", now=NOW)
        offer.evaluate([_item()], 37.50, "user-a", now=NOW)
        assert offer.usage_count == 0
        assert offer.is_valid(NOW) is True
