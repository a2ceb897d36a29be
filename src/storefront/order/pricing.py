"""Cart pricing: resolving lines against the catalog and computing totals.

Prices and categories always come from the catalog, never from the client.
Resolving the lines is also the "check" half of order placement: every
product is verified before any stock is touched.
"""

from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from shared.money import round_money
from storefront.product.product import Product

TAX_RATE = 0.08
FREE_SHIPPING_THRESHOLD = 100.0
SHIPPING_FLAT_FEE = 10.0


@dataclass(frozen=True)
class PricedLine:
    product: Product
    quantity: int
    customizations: list = field(default_factory=list)

    @property
    def unit_price(self) -> float:
        return self.product.price

    @property
    def customization_cost(self) -> float:
        return sum(c["additional_cost"] for c in self.customizations)

    @property
    def line_total(self) -> float:
        return round_money((self.unit_price + self.customization_cost) * self.quantity)

    def as_cart_item(self) -> dict:
        return {
            "product_id": str(self.product.id),
            "category": self.product.category,
            "price": self.unit_price,
            "quantity": self.quantity,
            "line_total": self.line_total,
        }


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    shipping: float
    tax: float
    discount: float = 0.0

    @property
    def total(self) -> float:
        return round_money(self.subtotal + self.shipping + self.tax - self.discount)


def shipping_for(subtotal: float) -> float:
    return 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else SHIPPING_FLAT_FEE


def tax_for(subtotal: float) -> float:
    return round_money(subtotal * TAX_RATE)


def compute_totals(lines, discount: float = 0.0) -> OrderTotals:
    subtotal = round_money(sum(line.line_total for line in lines))
    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping_for(subtotal),
        tax=tax_for(subtotal),
        discount=round_money(discount),
    )


def _load_active_product(product_id) -> Product:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": f"Product not found: {product_id}"}) from None
    if not product.is_active:
        raise ObjectNotFoundError({"_entity": f"Product not found: {product_id}"})
    return product


def price_lines(items, check_stock: bool = True) -> list[PricedLine]:
    """Resolve requested lines into priced lines.

    Args:
        items: list of dicts with product_id, quantity and optional
            customizations (list of {name, value}).
        check_stock: verify that the summed quantity per product fits the
            current stock.

    Raises:
        ObjectNotFoundError: a product is missing or inactive.
        ValidationError: bad quantity, customization or insufficient stock.
    """
    if not items:
        raise ValidationError({"items": ["Order must contain at least one item"]})

    products: dict[str, Product] = {}
    requested: dict[str, int] = {}
    lines = []

    for item in items:
        quantity = int(item.get("quantity") or 0)
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        product_id = str(item["product_id"])
        product = products.get(product_id)
        if product is None:
            product = products[product_id] = _load_active_product(product_id)

        if quantity < (product.min_order_quantity or 1):
            raise ValidationError(
                {"quantity": [f"Minimum order quantity for {product.name} is {product.min_order_quantity}"]}
            )

        customizations = product.resolve_customizations(item.get("customizations") or [])
        requested[product_id] = requested.get(product_id, 0) + quantity
        lines.append(PricedLine(product=product, quantity=quantity, customizations=customizations))

    if check_stock:
        for product_id, quantity in requested.items():
            product = products[product_id]
            if quantity > product.stock:
                raise ValidationError(
                    {"stock": [f"Insufficient stock for {product.name}. Available: {product.stock}"]}
                )

    return lines


def reserved_quantities(lines) -> dict[str, tuple[Product, int]]:
    """Collapse priced lines into one (product, quantity) pair per product."""
    reserved: dict[str, tuple[Product, int]] = {}
    for line in lines:
        product_id = str(line.product.id)
        _, quantity = reserved.get(product_id, (line.product, 0))
        reserved[product_id] = (line.product, quantity + line.quantity)
    return reserved
