"""Domain events for the Event aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from community.domain import community


@community.event(part_of="Event")
class EventScheduled:
    """A new event was put on the calendar."""

    __version__ = 1

    event_id = Identifier(required=True)
    title = String(required=True)
    category = String(required=True)
    date = DateTime(required=True)
    capacity = Integer(required=True)
    price = Float(default=0.0)


@community.event(part_of="Event")
class UserRegistered:
    """A user took a seat at an event."""

    __version__ = 1

    event_id = Identifier(required=True)
    user_id = Identifier(required=True)
    payment_status = String(required=True)
    registered_at = DateTime(required=True)


@community.event(part_of="Event")
class RegistrationCancelled:
    """A user gave up their seat at an event."""

    __version__ = 1

    event_id = Identifier(required=True)
    user_id = Identifier(required=True)
    cancelled_at = DateTime(required=True)
