"""Domain events for the Offer aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Offer")
class OfferCreated:
    """A promotional offer was published."""

    __version__ = 1

    offer_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    value = Float(required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)


@storefront.event(part_of="Offer")
class OfferRedeemed:
    """An offer was counted against a paid order."""

    __version__ = 1

    offer_id = Identifier(required=True)
    code = String(required=True)
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    usage_count = Integer(required=True)
    used_at = DateTime(required=True)
