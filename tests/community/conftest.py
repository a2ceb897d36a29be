import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def community_bed():
    from community.domain import community

    bed = DomainFixture(community)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(community_bed):
    with community_bed.domain_context():
        yield

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


def schedule_event(**overrides) -> str:
    from community.event.scheduling import ScheduleEvent

    defaults = {
        "title": "Introduction to Print Design",
        "description": "Learn the basics of print design",
        "category": "workshop",
        "date": datetime.now(UTC) + timedelta(days=7),
        "price": 0.0,
        "capacity": 2,
    }
    defaults.update(overrides)
    for key in ("location", "tags", "requirements"):
        if key in defaults and not isinstance(defaults[key], str):
            defaults[key] = json.dumps(defaults[key])
    return current_domain.process(ScheduleEvent(**defaults), asynchronous=False)


def organize_meetup(**overrides) -> str:
    from community.meetup.creation import OrganizeMeetup

    defaults = {
        "organizer_id": "organizer-001",
        "title": "Creative Entrepreneurs Networking",
        "description": "Connect with fellow creative entrepreneurs",
        "category": "networking",
        "date": datetime.now(UTC) + timedelta(days=10),
        "max_attendees": 2,
    }
    defaults.update(overrides)
    if "tags" in defaults and not isinstance(defaults["tags"], str):
        defaults["tags"] = json.dumps(defaults["tags"])
    return current_domain.process(OrganizeMeetup(**defaults), asynchronous=False)


@pytest.fixture()
def make_event():
    return schedule_event


@pytest.fixture()
def make_meetup():
    return organize_meetup
