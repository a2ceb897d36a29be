"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
and match the exact field names expected by the API's Pydantic request
schemas.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()

PRODUCT_CATEGORIES = [
    "printing",
    "packaging",
    "business-cards",
    "banners",
    "brochures",
    "boxes",
    "bags",
    "labels",
]
EVENT_CATEGORIES = ["workshop", "seminar", "exhibition", "networking", "training"]
MEETUP_CATEGORIES = ["business", "networking", "creative", "educational", "social"]


def shopper_id() -> str:
    """Generate shopper ids like 'user-lt-a1b2c3d4'."""
    return f"user-lt-{uuid.uuid4().hex[:8]}"


# ---------- Storefront ----------


def product_data() -> dict:
    """Generate AddProductRequest payload with plenty of stock."""
    word = fake.word().capitalize()
    return {
        "name": f"{word} {random.choice(['Cards', 'Boxes', 'Labels', 'Banner'])}"[:200],
        "description": fake.sentence(nb_words=10),
        "category": random.choice(PRODUCT_CATEGORIES),
        "price": round(random.uniform(5.0, 150.0), 2),
        "stock": random.randint(500, 5000),
        "min_order_quantity": 1,
        "tags": fake.words(nb=2),
    }


def offer_data() -> dict:
    """Generate a public percentage offer valid for the next month."""
    now = datetime.now(UTC)
    return {
        "title": f"Load test {fake.word()} sale",
        "code": f"LT{uuid.uuid4().hex[:8].upper()}",
        "discount_type": "percentage",
        "value": random.choice([5, 10, 15, 20]),
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=30)).isoformat(),
        "user_usage_limit": 1,
    }


def address_data() -> dict:
    """Generate AddressSchema payload."""
    return {
        "name": fake.name()[:100],
        "street": fake.street_address(),
        "city": fake.city(),
        "state": fake.state_abbr(),
        "zip_code": fake.zipcode(),
        "country": "US",
    }


def order_data(user_id: str, product_ids: list[str], offer_code: str | None = None) -> dict:
    """Generate PlaceOrderRequest payload over one to three catalog products."""
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, 3)))
    payload = {
        "user_id": user_id,
        "items": [{"product_id": pid, "quantity": random.randint(1, 3)} for pid in chosen],
        "shipping_address": address_data(),
        "payment_method": "card",
    }
    if offer_code:
        payload["offer_code"] = offer_code
    return payload


# ---------- Community ----------


def event_data(capacity: int | None = None) -> dict:
    """Generate ScheduleEventRequest payload a few weeks out."""
    date = datetime.now(UTC) + timedelta(days=random.randint(7, 60))
    return {
        "title": f"{fake.catch_phrase()}"[:200],
        "description": fake.paragraph(nb_sentences=2),
        "category": random.choice(EVENT_CATEGORIES),
        "date": date.isoformat(),
        "start_time": "10:00",
        "end_time": "14:00",
        "location": {"venue": fake.company(), "city": fake.city()},
        "price": random.choice([0.0, 29.99, 49.99]),
        "capacity": capacity or random.randint(20, 200),
        "tags": fake.words(nb=2),
    }


def meetup_data(organizer_id: str, requires_approval: bool = False) -> dict:
    """Generate OrganizeMeetupRequest payload."""
    date = datetime.now(UTC) + timedelta(days=random.randint(3, 30))
    return {
        "organizer_id": organizer_id,
        "title": f"{fake.bs().title()}"[:200],
        "description": fake.sentence(nb_words=12),
        "category": random.choice(MEETUP_CATEGORIES),
        "date": date.isoformat(),
        "max_attendees": random.randint(5, 30),
        "city": fake.city(),
        "requires_approval": requires_approval,
    }
