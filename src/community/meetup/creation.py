"""Meetup creation: command and handler."""

import json

from protean import handle
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from community.domain import community, logger
from community.meetup.meetup import Meetup


@community.command(part_of="Meetup")
class OrganizeMeetup:
    organizer_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True, max_length=30)
    date = DateTime(required=True)
    max_attendees = Integer(required=True)
    start_time = String(max_length=5)
    end_time = String(max_length=5)
    venue = String(max_length=200)
    address = String(max_length=255)
    city = String(max_length=100)
    is_online = Boolean(default=False)
    online_link = String(max_length=500)
    is_public = Boolean(default=True)
    requires_approval = Boolean(default=False)
    tags = Text()  # JSON array of strings


@community.command_handler(part_of=Meetup)
class OrganizeMeetupHandler:
    @handle(OrganizeMeetup)
    def organize(self, command):
        meetup = Meetup.organize(
            organizer_id=command.organizer_id,
            title=command.title,
            description=command.description,
            category=command.category,
            date=command.date,
            max_attendees=command.max_attendees,
            start_time=command.start_time,
            end_time=command.end_time,
            venue=command.venue,
            address=command.address,
            city=command.city,
            is_online=command.is_online or False,
            online_link=command.online_link,
            is_public=command.is_public if command.is_public is not None else True,
            requires_approval=command.requires_approval or False,
            tags=json.loads(command.tags) if command.tags else [],
        )
        current_domain.repository_for(Meetup).add(meetup)

        logger.info("meetup_organized", meetup_id=str(meetup.id), organizer_id=str(command.organizer_id))
        return str(meetup.id)
