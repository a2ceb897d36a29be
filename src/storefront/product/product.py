"""Product aggregate: the catalog entry and the stock it can sell.

Stock is only ever changed by the order pipeline, through `reserve_stock`
when an order is placed and `release_stock` when it is cancelled or the
processor gives up on its payment.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String, Text

from storefront.domain import storefront
from storefront.product.events import ProductAdded, StockReleased, StockReserved


class ProductCategory(Enum):
    PRINTING = "printing"
    PACKAGING = "packaging"
    BUSINESS_CARDS = "business-cards"
    BANNERS = "banners"
    BROCHURES = "brochures"
    BOXES = "boxes"
    BAGS = "bags"
    LABELS = "labels"


class CustomOptionType(Enum):
    TEXT = "text"
    SELECT = "select"
    COLOR = "color"
    FILE = "file"


@storefront.entity(part_of="Product")
class CustomOption:
    """A customization the buyer may choose when ordering, with its surcharge."""

    name = String(required=True, max_length=100)
    option_type = String(choices=CustomOptionType, default=CustomOptionType.TEXT.value)
    choices = Text()  # JSON array of allowed values for select options
    required = Boolean(default=False)
    additional_cost = Float(default=0.0, min_value=0.0)


@storefront.aggregate
class Product:
    name = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True, choices=ProductCategory)
    price = Float(required=True, min_value=0.0)
    compare_price = Float(min_value=0.0)
    stock = Integer(default=0, min_value=0)
    min_order_quantity = Integer(default=1, min_value=1)
    custom_options = HasMany(CustomOption)
    customizable = Boolean(default=False)
    is_active = Boolean(default=True)
    featured = Boolean(default=False)
    tags = Text()  # JSON array of strings
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def add(
        cls,
        name,
        description,
        category,
        price,
        stock=0,
        compare_price=None,
        min_order_quantity=1,
        custom_options=None,
        featured=False,
        tags=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            category=category,
            price=price,
            compare_price=compare_price,
            stock=stock,
            min_order_quantity=min_order_quantity or 1,
            customizable=bool(custom_options),
            featured=featured,
            tags=json.dumps(tags or []),
            created_at=now,
            updated_at=now,
        )
        for option in custom_options or []:
            product.add_custom_options(
                CustomOption(
                    name=option["name"],
                    option_type=option.get("option_type", CustomOptionType.TEXT.value),
                    choices=json.dumps(option.get("choices") or []),
                    required=option.get("required", False),
                    additional_cost=option.get("additional_cost", 0.0),
                )
            )

        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                category=product.category,
                price=product.price,
                stock=product.stock,
            )
        )
        return product

    @property
    def tag_list(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def reserve_stock(self, quantity, order_id=None):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if quantity > self.stock:
            raise ValidationError({"stock": [f"Insufficient stock for {self.name}. Available: {self.stock}"]})

        self.stock -= quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReserved(
                product_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                remaining=self.stock,
            )
        )

    def release_stock(self, quantity, order_id=None):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        self.stock += quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReleased(
                product_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                remaining=self.stock,
            )
        )

    # -------------------------------------------------------------------
    # Customizations
    # -------------------------------------------------------------------
    def resolve_customizations(self, customizations):
        """Match chosen customizations against this product's options.

        Args:
            customizations: list of dicts with `name` and `value`.

        Returns:
            The same selections with the option's `additional_cost` filled in.
        """
        options = {option.name: option for option in self.custom_options}
        resolved = []
        chosen = set()

        for selection in customizations or []:
            option = options.get(selection.get("name"))
            if option is None:
                raise ValidationError(
                    {"customizations": [f"Unknown option '{selection.get('name')}' for {self.name}"]}
                )
            allowed = json.loads(option.choices) if option.choices else []
            value = selection.get("value")
            if option.option_type == CustomOptionType.SELECT.value and allowed and value not in allowed:
                raise ValidationError(
                    {"customizations": [f"'{value}' is not a valid choice for {option.name}"]}
                )

            chosen.add(option.name)
            resolved.append(
                {
                    "name": option.name,
                    "value": value,
                    "additional_cost": option.additional_cost or 0.0,
                }
            )

        missing = [option.name for option in self.custom_options if option.required and option.name not in chosen]
        if missing:
            raise ValidationError({"customizations": [f"Missing required option(s): {', '.join(missing)}"]})

        return resolved

    def customization_cost(self, customizations) -> float:
        return sum(selection["additional_cost"] for selection in self.resolve_customizations(customizations))
