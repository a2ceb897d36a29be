"""Domain events for the Meetup aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from community.domain import community


@community.event(part_of="Meetup")
class MeetupOrganized:
    """A member organized a new meetup."""

    __version__ = 1

    meetup_id = Identifier(required=True)
    organizer_id = Identifier(required=True)
    title = String(required=True)
    date = DateTime(required=True)
    max_attendees = Integer(required=True)


@community.event(part_of="Meetup")
class MeetupJoined:
    """A user joined a meetup, either outright or pending approval."""

    __version__ = 1

    meetup_id = Identifier(required=True)
    user_id = Identifier(required=True)
    status = String(required=True)
    joined_at = DateTime(required=True)


@community.event(part_of="Meetup")
class MeetupLeft:
    """A user dropped out of a meetup."""

    __version__ = 1

    meetup_id = Identifier(required=True)
    user_id = Identifier(required=True)
    left_at = DateTime(required=True)


@community.event(part_of="Meetup")
class AttendeeApproved:
    """The organizer let a pending attendee in."""

    __version__ = 1

    meetup_id = Identifier(required=True)
    user_id = Identifier(required=True)
    approved_by = Identifier(required=True)
