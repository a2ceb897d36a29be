import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def gateway():
    """A fresh FakeGateway for every test."""
    from storefront.gateway import reset_gateway, set_gateway
    from storefront.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


SHIPPING_ADDRESS = {
    "name": "Ada Lovelace",
    "street": "12 Analytical Way",
    "city": "London",
    "state": "LDN",
    "zip_code": "N1 9GU",
    "country": "UK",
}


def add_product(**overrides) -> str:
    """Add a product through the command pipeline and return its id."""
    from storefront.product.creation import AddProduct

    defaults = {
        "name": "Premium Business Cards",
        "description": "High-quality business cards",
        "category": "business-cards",
        "price": 12.50,
        "stock": 10,
    }
    defaults.update(overrides)
    for key in ("custom_options", "tags"):
        if key in defaults and not isinstance(defaults[key], str):
            defaults[key] = json.dumps(defaults[key])
    return current_domain.process(AddProduct(**defaults), asynchronous=False)


def create_offer(**overrides) -> str:
    from storefront.offer.creation import CreateOffer

    now = datetime.now(UTC)
    defaults = {
        "title": "Welcome Offer",
        "code": "WELCOME20",
        "discount_type": "percentage",
        "value": 20,
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=30),
    }
    defaults.update(overrides)
    for key in ("applicable_products", "applicable_categories"):
        if key in defaults and not isinstance(defaults[key], str):
            defaults[key] = json.dumps(defaults[key])
    return current_domain.process(CreateOffer(**defaults), asynchronous=False)


def place_order(items, user_id="user-001", offer_code=None, **overrides) -> str:
    from storefront.order.placement import PlaceOrder

    command = PlaceOrder(
        user_id=user_id,
        items=json.dumps(items),
        shipping_address=json.dumps(overrides.pop("shipping_address", SHIPPING_ADDRESS)),
        offer_code=offer_code,
        **overrides,
    )
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def make_product():
    return add_product


@pytest.fixture()
def make_offer():
    return create_offer


@pytest.fixture()
def order_placer():
    return place_order
