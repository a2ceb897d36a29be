"""Event scheduling: command and handler."""

import json

from protean import handle
from protean.fields import Boolean, DateTime, Float, Integer, String, Text
from protean.utils.globals import current_domain

from community.domain import community, logger
from community.event.event import Event


@community.command(part_of="Event")
class ScheduleEvent:
    title = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True, max_length=30)
    date = DateTime(required=True)
    end_date = DateTime()
    start_time = String(max_length=5)
    end_time = String(max_length=5)
    location = Text()  # JSON: location dict
    price = Float(default=0.0)
    capacity = Integer(required=True)
    organizer_name = String(max_length=200)
    organizer_email = String(max_length=254)
    featured = Boolean(default=False)
    tags = Text()  # JSON array of strings
    requirements = Text()  # JSON array of strings


@community.command_handler(part_of=Event)
class ScheduleEventHandler:
    @handle(ScheduleEvent)
    def schedule_event(self, command):
        event = Event.schedule(
            title=command.title,
            description=command.description,
            category=command.category,
            date=command.date,
            end_date=command.end_date,
            start_time=command.start_time,
            end_time=command.end_time,
            location=json.loads(command.location) if command.location else None,
            price=command.price,
            capacity=command.capacity,
            organizer_name=command.organizer_name,
            organizer_email=command.organizer_email,
            featured=command.featured or False,
            tags=json.loads(command.tags) if command.tags else [],
            requirements=json.loads(command.requirements) if command.requirements else [],
        )
        current_domain.repository_for(Event).add(event)

        logger.info("event_scheduled", event_id=str(event.id), date=event.date.isoformat(), capacity=event.capacity)
        return str(event.id)
