"""Meetup aggregate: a member-organized gathering with a head count limit.

Only attendees in the JOINED status count against `max_attendees`. When the
organizer requires approval, new attendees start as MAYBE and take a place
once the organizer approves them.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from community.domain import community
from community.meetup.events import AttendeeApproved, MeetupJoined, MeetupLeft, MeetupOrganized
from shared.clock import as_utc, utc_now


class MeetupCategory(Enum):
    BUSINESS = "business"
    NETWORKING = "networking"
    CREATIVE = "creative"
    EDUCATIONAL = "educational"
    SOCIAL = "social"


class AttendeeStatus(Enum):
    JOINED = "joined"
    MAYBE = "maybe"
    DECLINED = "declined"


@community.entity(part_of="Meetup")
class Attendee:
    user_id = Identifier(required=True)
    joined_at = DateTime(required=True)
    status = String(choices=AttendeeStatus, default=AttendeeStatus.JOINED.value)


@community.aggregate
class Meetup:
    title = String(required=True, max_length=200)
    description = Text(required=True)
    organizer_id = Identifier(required=True)
    date = DateTime(required=True)
    start_time = String(max_length=5)
    end_time = String(max_length=5)
    venue = String(max_length=200)
    address = String(max_length=255)
    city = String(max_length=100)
    is_online = Boolean(default=False)
    online_link = String(max_length=500)
    max_attendees = Integer(required=True, min_value=2)
    attendees = HasMany(Attendee)
    category = String(required=True, choices=MeetupCategory)
    is_public = Boolean(default=True)
    requires_approval = Boolean(default=False)
    is_active = Boolean(default=True)
    tags = Text()  # JSON array of strings
    created_at = DateTime()

    @invariant.post
    def head_count_cannot_exceed_limit(self):
        if self.max_attendees is not None and self.joined_count > self.max_attendees:
            raise ValidationError({"max_attendees": ["Meetup is full"]})

    @classmethod
    def organize(
        cls,
        organizer_id,
        title,
        description,
        category,
        date,
        max_attendees,
        start_time=None,
        end_time=None,
        venue=None,
        address=None,
        city=None,
        is_online=False,
        online_link=None,
        is_public=True,
        requires_approval=False,
        tags=None,
    ):
        meetup = cls(
            organizer_id=organizer_id,
            title=title,
            description=description,
            category=category,
            date=as_utc(date),
            max_attendees=max_attendees,
            start_time=start_time,
            end_time=end_time,
            venue=venue,
            address=address,
            city=city,
            is_online=is_online,
            online_link=online_link,
            is_public=is_public,
            requires_approval=requires_approval,
            tags=json.dumps(tags or []),
            created_at=datetime.now(UTC),
        )
        meetup.raise_(
            MeetupOrganized(
                meetup_id=str(meetup.id),
                organizer_id=str(organizer_id),
                title=meetup.title,
                date=meetup.date,
                max_attendees=meetup.max_attendees,
            )
        )
        return meetup

    @property
    def joined_count(self) -> int:
        return sum(1 for a in self.attendees if a.status == AttendeeStatus.JOINED.value)

    @property
    def available_spots(self) -> int:
        return max(self.max_attendees - self.joined_count, 0)

    def attendee_for(self, user_id):
        return next((a for a in self.attendees if str(a.user_id) == str(user_id)), None)

    def join(self, user_id, now=None) -> str:
        """Add the user, returning the attendee status they were given."""
        now = utc_now(now)
        if as_utc(self.date) < now:
            raise ValidationError({"date": ["Cannot join past meetups"]})
        if self.attendee_for(user_id) is not None:
            raise ValidationError({"attendee": ["Already joined this meetup"]})
        if self.joined_count >= self.max_attendees:
            raise ValidationError({"max_attendees": ["Meetup is full"]})

        status = AttendeeStatus.MAYBE.value if self.requires_approval else AttendeeStatus.JOINED.value
        self.add_attendees(Attendee(user_id=str(user_id), joined_at=now, status=status))
        self.raise_(MeetupJoined(meetup_id=str(self.id), user_id=str(user_id), status=status, joined_at=now))
        return status

    def leave(self, user_id, now=None):
        attendee = self.attendee_for(user_id)
        if attendee is None:
            raise ValidationError({"attendee": ["Not attending this meetup"]})

        self.remove_attendees(attendee)
        self.raise_(MeetupLeft(meetup_id=str(self.id), user_id=str(user_id), left_at=utc_now(now)))

    def approve(self, user_id, approved_by):
        """Let a pending (MAYBE) attendee in. Only the organizer may approve."""
        if str(approved_by) != str(self.organizer_id):
            raise ValidationError({"organizer": ["Only the organizer can approve attendees"]})

        attendee = self.attendee_for(user_id)
        if attendee is None:
            raise ValidationError({"attendee": ["Not attending this meetup"]})
        if attendee.status != AttendeeStatus.MAYBE.value:
            raise ValidationError({"attendee": ["Attendee is not awaiting approval"]})
        if self.joined_count >= self.max_attendees:
            raise ValidationError({"max_attendees": ["Meetup is full"]})

        attendee.status = AttendeeStatus.JOINED.value
        self.raise_(AttendeeApproved(meetup_id=str(self.id), user_id=str(user_id), approved_by=str(approved_by)))
