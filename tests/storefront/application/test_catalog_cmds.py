"""Application tests for AddProduct and the catalog read side."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from storefront.product.catalog import browse_products, find_product, list_categories
from storefront.product.product import Product


class TestAddProduct:
    def test_add_persists_product(self, make_product):
        product_id = make_product(
            custom_options=[{"name": "Finish", "option_type": "select", "choices": ["Matte"], "required": True}],
            tags=["cards"],
        )
        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Premium Business Cards"
        assert product.customizable is True
        assert product.custom_options[0].name == "Finish"
        assert product.tag_list == ["cards"]

    def test_find_hides_inactive_products(self, make_product):
        product_id = make_product()
        repo = current_domain.repository_for(Product)
        product = repo.get(product_id)
        product.is_active = False
        repo.add(product)

        with pytest.raises(ObjectNotFoundError):
            find_product(product_id)


class TestBrowseProducts:
    @pytest.fixture(autouse=True)
    def catalog(self, make_product):
        make_product(name="Business Cards", category="business-cards", price=29.99, featured=True)
        make_product(name="Gift Bags", category="bags", price=12.99, description="Elegant bags for gifts")
        make_product(name="Vinyl Banners", category="banners", price=89.99)

    def test_lists_active_products(self):
        page = browse_products()
        assert page.total == 3
        assert page.page == 1

    def test_filters_by_category(self):
        page = browse_products(category="bags")
        assert [p.name for p in page.items] == ["Gift Bags"]

    def test_filters_by_price_range(self):
        page = browse_products(min_price=20, max_price=50)
        assert [p.name for p in page.items] == ["Business Cards"]

    def test_searches_name_and_description(self):
        assert browse_products(search="banner").total == 1
        assert browse_products(search="GIFTS").total == 1

    def test_filters_featured(self):
        assert [p.name for p in browse_products(featured=True).items] == ["Business Cards"]

    def test_sorts_by_price(self):
        page = browse_products(sort="price", order="asc")
        assert [p.price for p in page.items] == [12.99, 29.99, 89.99]

    def test_pages(self):
        page = browse_products(sort="price", order="asc", page=2, limit=2)
        assert [p.price for p in page.items] == [89.99]
        assert page.total_pages == 2

    def test_categories(self):
        categories = list_categories()
        assert "business-cards" in categories
        assert len(categories) == 8
