"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared
across users. State tracks ids returned by creation endpoints so
follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CheckoutState:
    """Tracks a shopper from browsing through to a paid order."""

    user_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    offer_code: str | None = None
    order_id: str | None = None
    payment_intent_id: str | None = None
    current_status: str = "pending"


@dataclass
class EventState:
    """Tracks an event and the members registered for it."""

    event_id: str | None = None
    registered_user_ids: list[str] = field(default_factory=list)


@dataclass
class MeetupState:
    """Tracks a meetup, its organizer and pending join requests."""

    meetup_id: str | None = None
    organizer_id: str | None = None
    pending_user_ids: list[str] = field(default_factory=list)
