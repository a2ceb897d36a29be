"""Shared BDD fixtures and step definitions for the Storefront domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.order.order import Order
from storefront.product.product import Product


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def catalog():
    """Product ids by name."""
    return {}


@pytest.fixture()
def checkout():
    """The order under test."""
    return {"order_id": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_catalog(name, price, stock, catalog, make_product):
    catalog[name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('an active "{discount_type}" offer "{code}" worth {value:d}'))
def active_offer(discount_type, code, value, make_offer):
    make_offer(code=code, discount_type=discount_type, value=value)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(name, stock, catalog):
    assert current_domain.repository_for(Product).get(catalog[name]).stock == stock


@then(parsers.cfparse('the order is "{status}"'))
def order_status(status, checkout):
    assert current_domain.repository_for(Order).get(checkout["order_id"]).status == status
