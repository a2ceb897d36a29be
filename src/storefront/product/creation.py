"""Product creation: command and handler."""

import json

from protean import handle
from protean.fields import Boolean, Float, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True, max_length=50)
    price = Float(required=True, min_value=0.0)
    compare_price = Float()
    stock = Integer(default=0)
    min_order_quantity = Integer(default=1)
    custom_options = Text()  # JSON: list of {name, option_type, choices, required, additional_cost}
    featured = Boolean(default=False)
    tags = Text()  # JSON array of strings


@storefront.command_handler(part_of=Product)
class AddProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            compare_price=command.compare_price,
            stock=command.stock or 0,
            min_order_quantity=command.min_order_quantity,
            custom_options=json.loads(command.custom_options) if command.custom_options else [],
            featured=command.featured or False,
            tags=json.loads(command.tags) if command.tags else [],
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
