"""Event registration: commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from community.domain import community, logger
from community.event.event import Event
from community.event.listing import find_event


@community.command(part_of="Event")
class RegisterForEvent:
    event_id = Identifier(required=True)
    user_id = Identifier(required=True)


@community.command(part_of="Event")
class CancelEventRegistration:
    event_id = Identifier(required=True)
    user_id = Identifier(required=True)


@community.command_handler(part_of=Event)
class EventRegistrationHandler:
    @handle(RegisterForEvent)
    def register(self, command):
        event = find_event(command.event_id)
        event.register(command.user_id)
        current_domain.repository_for(Event).add(event)

        logger.info("event_registration", event_id=str(event.id), user_id=str(command.user_id))
        return event.available_spots

    @handle(CancelEventRegistration)
    def cancel_registration(self, command):
        event = find_event(command.event_id)
        event.cancel_registration(command.user_id)
        current_domain.repository_for(Event).add(event)

        logger.info("event_registration_cancelled", event_id=str(event.id), user_id=str(command.user_id))
        return event.available_spots
