"""Domain tests for recording offer redemptions."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.offer.events import OfferCreated, OfferRedeemed
from storefront.offer.offer import Offer

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def _offer(**overrides):
    defaults = {
        "title": "Free Shipping Weekend",
        "code": "FREESHIP",
        "discount_type": "free_shipping",
        "value": 10,
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=6),
    }
    defaults.update(overrides)
    return Offer.create(**defaults)


class TestRecordUsage:
    def test_create_raises_offer_created(self):
        offer = _offer()
        assert isinstance(offer._events[0], OfferCreated)
        assert offer._events[0].code == "FREESHIP"

    def test_record_usage_counts_once(self):
        offer = _offer()
        offer._events.clear()

        assert offer.record_usage("user-a", "order-1", now=NOW) is True

        assert offer.usage_count == 1
        assert offer.uses_by("user-a") == 1
        event = offer._events[-1]
        assert isinstance(event, OfferRedeemed)
        assert event.order_id == "order-1"
        assert event.usage_count == 1

    def test_same_order_is_not_counted_twice(self):
        offer = _offer()
        offer.record_usage("user-a", "order-1", now=NOW)

        assert offer.record_usage("user-a", "order-1", now=NOW) is False
        assert offer.usage_count == 1

    def test_per_user_limit_enforced(self):
        offer = _offer(user_usage_limit=1)
        offer.record_usage("user-a", "order-1", now=NOW)

        with pytest.raises(ValidationError) as exc:
            offer.record_usage("user-a", "order-2", now=NOW)
        assert exc.value.messages["user_id"] == ["You have already used this offer"]

    def test_per_user_limit_above_one(self):
        offer = _offer(user_usage_limit=2)
        offer.record_usage("user-a", "order-1", now=NOW)
        offer.record_usage("user-a", "order-2", now=NOW)
        assert offer.usage_count == 2

    def test_global_limit_enforced(self):
        offer = _offer(usage_limit=2)
        offer.record_usage("user-a", "order-1", now=NOW)
        offer.record_usage("user-b", "order-2", now=NOW)

        with pytest.raises(ValidationError) as exc:
            offer.record_usage("user-c", "order-3", now=NOW)
        assert "usage_count" in exc.value.messages
        assert offer.usage_count == 2

