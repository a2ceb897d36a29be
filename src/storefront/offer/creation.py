"""Offer creation: command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.offer.offer import Offer, normalize_code


@storefront.command(part_of="Offer")
class CreateOffer:
    title = String(required=True, max_length=200)
    description = Text()
    code = String(required=True, max_length=50)
    discount_type = String(required=True, max_length=30)
    value = Float(required=True, min_value=0.0)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    minimum_order_amount = Float(default=0.0)
    maximum_discount = Float()
    applicable_products = Text()  # JSON array of product ids
    applicable_categories = Text()  # JSON array of category names
    usage_limit = Integer()
    user_usage_limit = Integer(default=1)
    is_public = Boolean(default=True)
    target_audience = String(max_length=30)


@storefront.command_handler(part_of=Offer)
class CreateOfferHandler:
    @handle(CreateOffer)
    def create_offer(self, command):
        repo = current_domain.repository_for(Offer)

        code = normalize_code(command.code)
        if len(code) < 3:
            raise ValidationError({"code": ["Offer code must be at least 3 characters"]})
        if repo._dao.query.filter(code=code).all().items:
            raise ValidationError({"code": ["Offer code already exists"]})

        offer = Offer.create(
            title=command.title,
            description=command.description,
            code=code,
            discount_type=command.discount_type,
            value=command.value,
            start_date=command.start_date,
            end_date=command.end_date,
            minimum_order_amount=command.minimum_order_amount,
            maximum_discount=command.maximum_discount,
            applicable_products=json.loads(command.applicable_products) if command.applicable_products else [],
            applicable_categories=json.loads(command.applicable_categories) if command.applicable_categories else [],
            usage_limit=command.usage_limit,
            user_usage_limit=command.user_usage_limit,
            is_public=command.is_public if command.is_public is not None else True,
            target_audience=command.target_audience,
        )
        repo.add(offer)
        return str(offer.id)
