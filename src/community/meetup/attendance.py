"""Meetup attendance: join, leave and organizer approval."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from community.domain import community, logger
from community.meetup.listing import find_meetup
from community.meetup.meetup import Meetup


@community.command(part_of="Meetup")
class JoinMeetup:
    meetup_id = Identifier(required=True)
    user_id = Identifier(required=True)


@community.command(part_of="Meetup")
class LeaveMeetup:
    meetup_id = Identifier(required=True)
    user_id = Identifier(required=True)


@community.command(part_of="Meetup")
class ApproveAttendee:
    meetup_id = Identifier(required=True)
    user_id = Identifier(required=True)
    organizer_id = Identifier(required=True)


@community.command_handler(part_of=Meetup)
class MeetupAttendanceHandler:
    @handle(JoinMeetup)
    def join(self, command):
        meetup = find_meetup(command.meetup_id)
        status = meetup.join(command.user_id)
        current_domain.repository_for(Meetup).add(meetup)

        logger.info("meetup_joined", meetup_id=str(meetup.id), user_id=str(command.user_id), status=status)
        return status

    @handle(LeaveMeetup)
    def leave(self, command):
        meetup = find_meetup(command.meetup_id)
        meetup.leave(command.user_id)
        current_domain.repository_for(Meetup).add(meetup)

        logger.info("meetup_left", meetup_id=str(meetup.id), user_id=str(command.user_id))

    @handle(ApproveAttendee)
    def approve(self, command):
        meetup = find_meetup(command.meetup_id)
        meetup.approve(command.user_id, approved_by=command.organizer_id)
        current_domain.repository_for(Meetup).add(meetup)

        logger.info("attendee_approved", meetup_id=str(meetup.id), user_id=str(command.user_id))
