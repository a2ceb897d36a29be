"""Domain tests for the Product aggregate: creation, stock and customizations."""

import pytest
from protean.exceptions import ValidationError
from storefront.product.events import ProductAdded, StockReleased, StockReserved
from storefront.product.product import CustomOptionType, Product


def _product(**overrides):
    defaults = {
        "name": "Vinyl Banner",
        "description": "Weather-resistant vinyl banner",
        "category": "banners",
        "price": 89.99,
        "stock": 5,
    }
    defaults.update(overrides)
    return Product.add(**defaults)


def _customizable_product():
    return _product(
        custom_options=[
            {
                "name": "Finish",
                "option_type": CustomOptionType.SELECT.value,
                "choices": ["Matte", "Gloss"],
                "required": True,
                "additional_cost": 5.0,
            },
            {"name": "Slogan", "option_type": CustomOptionType.TEXT.value, "additional_cost": 2.5},
        ]
    )


class TestProductCreation:
    def test_add_sets_fields(self):
        product = _product(tags=["outdoor", "vinyl"])
        assert product.name == "Vinyl Banner"
        assert product.stock == 5
        assert product.is_active is True
        assert product.tag_list == ["outdoor", "vinyl"]
        assert product.customizable is False

    def test_add_raises_product_added(self):
        product = _product()
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductAdded)
        assert event.product_id == str(product.id)
        assert event.stock == 5

    def test_custom_options_make_product_customizable(self):
        product = _customizable_product()
        assert product.customizable is True
        assert len(product.custom_options) == 2

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _product(category="spaceships")
        assert "category" in exc.value.messages

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _product(price=-1.0)


class TestStockReservation:
    def test_reserve_decrements_stock(self):
        product = _product()
        product._events.clear()

        product.reserve_stock(3, order_id="ord-001")

        assert product.stock == 2
        event = product._events[-1]
        assert isinstance(event, StockReserved)
        assert event.quantity == 3
        assert event.remaining == 2
        assert event.order_id == "ord-001"

    def test_reserve_entire_stock(self):
        product = _product()
        product.reserve_stock(5)
        assert product.stock == 0

    def test_reserve_more_than_available_fails(self):
        product = _product()
        with pytest.raises(ValidationError) as exc:
            product.reserve_stock(6)
        assert exc.value.messages["stock"] == ["Insufficient stock for Vinyl Banner. Available: 5"]
        assert product.stock == 5

    def test_reserve_zero_fails(self):
        product = _product()
        with pytest.raises(ValidationError) as exc:
            product.reserve_stock(0)
        assert "quantity" in exc.value.messages

    def test_release_increments_stock(self):
        product = _product()
        product.reserve_stock(4)
        product._events.clear()

        product.release_stock(4, order_id="ord-001")

        assert product.stock == 5
        assert isinstance(product._events[-1], StockReleased)


class TestCustomizations:
    def test_resolve_fills_in_costs(self):
        product = _customizable_product()
        resolved = product.resolve_customizations(
            [{"name": "Finish", "value": "Gloss"}, {"name": "Slogan", "value": "Print it!"}]
        )
        assert resolved == [
            {"name": "Finish", "value": "Gloss", "additional_cost": 5.0},
            {"name": "Slogan", "value": "Print it!", "additional_cost": 2.5},
        ]
        assert product.customization_cost([{"name": "Finish", "value": "Matte"}]) == 5.0

    def test_unknown_option_rejected(self):
        product = _customizable_product()
        with pytest.raises(ValidationError) as exc:
            product.resolve_customizations([{"name": "Finish", "value": "Matte"}, {"name": "Glitter", "value": "yes"}])
        assert "customizations" in exc.value.messages

    def test_invalid_choice_rejected(self):
        product = _customizable_product()
        with pytest.raises(ValidationError) as exc:
            product.resolve_customizations([{"name": "Finish", "value": "Satin"}])
        assert exc.value.messages["customizations"] == ["'Satin' is not a valid choice for Finish"]

    def test_missing_required_option_rejected(self):
        product = _customizable_product()
        with pytest.raises(ValidationError) as exc:
            product.resolve_customizations([{"name": "Slogan", "value": "Hi"}])
        assert exc.value.messages["customizations"] == ["Missing required option(s): Finish"]

    def test_plain_product_accepts_no_customizations(self):
        assert _product().resolve_customizations([]) == []
