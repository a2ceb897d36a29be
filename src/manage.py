"""Planet Scribbles database management CLI.

Provides commands to create and drop database schemas for both domains and
to load the demo catalog.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed-db    # Load demo products, offers, events and meetups
"""

import argparse
import json
import sys
from datetime import UTC, datetime, timedelta

DOMAIN_NAMES = ["storefront", "community"]

DEMO_ORGANIZER_ID = "demo-organizer"

SAMPLE_PRODUCTS = [
    {
        "name": "Premium Business Cards",
        "description": "High-quality business cards with premium finishes. Perfect for making a lasting impression.",
        "category": "business-cards",
        "price": 29.99,
        "compare_price": 39.99,
        "stock": 100,
        "featured": True,
        "tags": ["business", "cards", "premium", "professional"],
    },
    {
        "name": "Custom Packaging Boxes",
        "description": "Durable custom packaging boxes for your products. Various sizes and designs available.",
        "category": "boxes",
        "price": 45.00,
        "stock": 50,
        "featured": True,
        "tags": ["packaging", "boxes", "custom", "shipping"],
    },
    {
        "name": "Marketing Brochures",
        "description": "Eye-catching brochures to showcase your business. Full-color printing on quality paper.",
        "category": "brochures",
        "price": 35.00,
        "stock": 75,
        "featured": True,
        "tags": ["brochures", "marketing", "full-color", "business"],
    },
    {
        "name": "Vinyl Banners",
        "description": "Weather-resistant vinyl banners for outdoor advertising. Custom sizes and designs.",
        "category": "banners",
        "price": 89.99,
        "stock": 25,
        "tags": ["banners", "vinyl", "outdoor", "advertising"],
    },
    {
        "name": "Custom Labels & Stickers",
        "description": "High-quality labels and stickers for products, packaging, and promotional use.",
        "category": "labels",
        "price": 19.99,
        "stock": 200,
        "tags": ["labels", "stickers", "custom", "waterproof"],
    },
    {
        "name": "Gift Bags",
        "description": "Elegant gift bags for special occasions. Various sizes and colors available.",
        "category": "bags",
        "price": 12.99,
        "stock": 150,
        "tags": ["gifts", "bags", "occasions", "premium"],
    },
]


def _sample_offers(now):
    return [
        {
            "title": "New Customer Special",
            "description": "Get 20% off your first order! Use code WELCOME20 at checkout.",
            "discount_type": "percentage",
            "value": 20,
            "code": "WELCOME20",
            "minimum_order_amount": 25,
            "maximum_discount": 50,
            "start_date": now,
            "end_date": now + timedelta(days=30),
            "target_audience": "new_customers",
            "usage_limit": 100,
            "user_usage_limit": 1,
        },
        {
            "title": "Free Shipping Weekend",
            "description": "Free shipping on all orders this weekend! No minimum required.",
            "discount_type": "free_shipping",
            "value": 10,
            "code": "FREESHIP",
            "start_date": now,
            "end_date": now + timedelta(days=7),
            "target_audience": "all",
            "user_usage_limit": 1,
        },
    ]


def _sample_events(now):
    return [
        {
            "title": "Introduction to Print Design",
            "description": "Learn the basics of print design, color theory, and typography. Perfect for beginners.",
            "category": "workshop",
            "date": now + timedelta(days=7),
            "start_time": "10:00",
            "end_time": "14:00",
            "location": {
                "venue": "Planet Scribbles Studio",
                "address": "123 Business Street",
                "city": "City",
                "state": "State",
                "zip_code": "12345",
            },
            "price": 49.99,
            "capacity": 20,
            "featured": True,
            "tags": ["design", "beginner", "workshop"],
        },
        {
            "title": "Packaging Design Masterclass",
            "description": "Advanced techniques for creating compelling packaging designs that sell.",
            "category": "seminar",
            "date": now + timedelta(days=14),
            "start_time": "13:00",
            "end_time": "17:00",
            "location": {
                "venue": "Conference Center",
                "address": "456 Design Avenue",
                "city": "City",
                "state": "State",
                "zip_code": "12345",
            },
            "price": 89.99,
            "capacity": 30,
            "featured": True,
            "tags": ["packaging", "advanced", "masterclass"],
        },
    ]


def _sample_meetup(now):
    return {
        "organizer_id": DEMO_ORGANIZER_ID,
        "title": "Creative Entrepreneurs Networking",
        "description": "Connect with fellow creative entrepreneurs and share experiences.",
        "date": now + timedelta(days=10),
        "start_time": "18:00",
        "end_time": "20:00",
        "venue": "Community Center",
        "address": "321 Community Street",
        "city": "City",
        "max_attendees": 25,
        "category": "networking",
        "tags": ["networking", "entrepreneurs", "creative"],
    }


def _load_domains(names):
    from community.domain import community
    from storefront.domain import storefront

    all_domains = {"storefront": storefront, "community": community}
    return {n: all_domains[n] for n in names} if names else all_domains


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        providers = setup_db(domain)
        print(f"  {name} schema ready ({', '.join(providers) or 'no relational providers'}).")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def _seed_storefront(domain, now):
    from storefront.offer.creation import CreateOffer
    from storefront.product.creation import AddProduct

    with domain.domain_context():
        for product in SAMPLE_PRODUCTS:
            domain.process(AddProduct(**{**product, "tags": json.dumps(product["tags"])}), asynchronous=False)
        print(f"  Seeded {len(SAMPLE_PRODUCTS)} products")

        offers = _sample_offers(now)
        for offer in offers:
            domain.process(CreateOffer(**offer), asynchronous=False)
        print(f"  Seeded {len(offers)} offers")


def _seed_community(domain, now):
    from community.event.scheduling import ScheduleEvent
    from community.meetup.creation import OrganizeMeetup

    with domain.domain_context():
        events = _sample_events(now)
        for event in events:
            command = ScheduleEvent(
                **{
                    **event,
                    "location": json.dumps(event["location"]),
                    "tags": json.dumps(event["tags"]),
                }
            )
            domain.process(command, asynchronous=False)
        print(f"  Seeded {len(events)} events")

        meetup = _sample_meetup(now)
        domain.process(OrganizeMeetup(**{**meetup, "tags": json.dumps(meetup["tags"])}), asynchronous=False)
        print("  Created sample meetup")


def seed_databases(domains=None):
    """Load the demo catalog into the specified (or all) domains."""
    seeders = {"storefront": _seed_storefront, "community": _seed_community}
    now = datetime.now(UTC)

    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Seeding {name}...")
        seeders[name](domain, now)

    print("Database seeded successfully!")


def main():
    parser = argparse.ArgumentParser(description="Planet Scribbles database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("setup-db", "Create all database tables"),
        ("drop-db", "Drop all database tables"),
        ("seed-db", "Load demo products, offers, events and meetups"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific domain(s) to act on (default: all)",
        )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "seed-db":
        seed_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
