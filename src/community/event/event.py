"""Event aggregate: a scheduled workshop, seminar or exhibition with limited seats.

Only registrations in the REGISTERED status hold a seat. A registration is
removed outright when cancelled, which frees the seat and lets the same user
register again later.
"""

import json
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from community.domain import community
from community.event.events import EventScheduled, RegistrationCancelled, UserRegistered
from shared.clock import as_utc, utc_now

CANCELLATION_CUTOFF = timedelta(hours=24)


class EventCategory(Enum):
    WORKSHOP = "workshop"
    SEMINAR = "seminar"
    EXHIBITION = "exhibition"
    NETWORKING = "networking"
    TRAINING = "training"


class RegistrationStatus(Enum):
    REGISTERED = "registered"
    ATTENDED = "attended"
    CANCELLED = "cancelled"


class RegistrationPaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


@community.value_object(part_of="Event")
class Location:
    venue = String(max_length=200)
    address = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    is_online = Boolean(default=False)
    online_link = String(max_length=500)


@community.entity(part_of="Event")
class Registration:
    user_id = Identifier(required=True)
    registered_at = DateTime(required=True)
    status = String(choices=RegistrationStatus, default=RegistrationStatus.REGISTERED.value)
    payment_status = String(choices=RegistrationPaymentStatus, default=RegistrationPaymentStatus.PENDING.value)


@community.aggregate
class Event:
    title = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True, choices=EventCategory)
    date = DateTime(required=True)
    end_date = DateTime()
    start_time = String(max_length=5)
    end_time = String(max_length=5)
    location = ValueObject(Location)
    price = Float(default=0.0, min_value=0.0)
    capacity = Integer(required=True, min_value=1)
    registrations = HasMany(Registration)
    organizer_name = String(max_length=200)
    organizer_email = String(max_length=254)
    is_active = Boolean(default=True)
    featured = Boolean(default=False)
    tags = Text()  # JSON array of strings
    requirements = Text()  # JSON array of strings
    created_at = DateTime()

    @invariant.post
    def seats_cannot_exceed_capacity(self):
        if self.capacity is not None and self.registered_count > self.capacity:
            raise ValidationError({"capacity": ["Event is full"]})

    @classmethod
    def schedule(
        cls,
        title,
        description,
        category,
        date,
        capacity,
        price=0.0,
        end_date=None,
        start_time=None,
        end_time=None,
        location=None,
        organizer_name=None,
        organizer_email=None,
        featured=False,
        tags=None,
        requirements=None,
    ):
        event = cls(
            title=title,
            description=description,
            category=category,
            date=as_utc(date),
            end_date=as_utc(end_date),
            start_time=start_time,
            end_time=end_time,
            location=Location(**location) if location else None,
            price=price or 0.0,
            capacity=capacity,
            organizer_name=organizer_name,
            organizer_email=organizer_email,
            featured=featured,
            tags=json.dumps(tags or []),
            requirements=json.dumps(requirements or []),
            created_at=datetime.now(UTC),
        )
        event.raise_(
            EventScheduled(
                event_id=str(event.id),
                title=event.title,
                category=event.category,
                date=event.date,
                capacity=event.capacity,
                price=event.price,
            )
        )
        return event

    # -------------------------------------------------------------------
    # Seats
    # -------------------------------------------------------------------
    @property
    def registered_count(self) -> int:
        return sum(1 for r in self.registrations if r.status == RegistrationStatus.REGISTERED.value)

    @property
    def available_spots(self) -> int:
        return max(self.capacity - self.registered_count, 0)

    def registration_for(self, user_id):
        return next((r for r in self.registrations if str(r.user_id) == str(user_id)), None)

    def register(self, user_id, now=None):
        """Take a seat for the user."""
        now = utc_now(now)
        if as_utc(self.date) < now:
            raise ValidationError({"date": ["Cannot register for past events"]})
        if self.registration_for(user_id) is not None:
            raise ValidationError({"registration": ["Already registered for this event"]})
        if self.registered_count >= self.capacity:
            raise ValidationError({"capacity": ["Event is full"]})

        payment_status = (
            RegistrationPaymentStatus.PAID.value if not self.price else RegistrationPaymentStatus.PENDING.value
        )
        self.add_registrations(
            Registration(
                user_id=str(user_id),
                registered_at=now,
                status=RegistrationStatus.REGISTERED.value,
                payment_status=payment_status,
            )
        )
        self.raise_(
            UserRegistered(
                event_id=str(self.id),
                user_id=str(user_id),
                payment_status=payment_status,
                registered_at=now,
            )
        )

    def cancel_registration(self, user_id, now=None):
        """Give the user's seat back; not allowed within 24 hours of the start."""
        now = utc_now(now)
        registration = self.registration_for(user_id)
        if registration is None:
            raise ValidationError({"registration": ["Not registered for this event"]})
        if as_utc(self.date) - now < CANCELLATION_CUTOFF:
            raise ValidationError({"date": ["Cannot cancel registration less than 24 hours before event"]})

        self.remove_registrations(registration)
        self.raise_(
            RegistrationCancelled(
                event_id=str(self.id),
                user_id=str(user_id),
                cancelled_at=now,
            )
        )
