"""FastAPI routes for the Community domain: events and meetups."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from community.api.schemas import (
    ApproveAttendeeRequest,
    EventIdResponse,
    EventListResponse,
    EventResponse,
    JoinMeetupResponse,
    MeetupIdResponse,
    MeetupListResponse,
    MeetupResponse,
    MessageResponse,
    OrganizeMeetupRequest,
    ParticipantRequest,
    RegistrationChangeResponse,
    ScheduleEventRequest,
)
from community.event.event import Event
from community.event.listing import browse_events, find_event
from community.event.registration import CancelEventRegistration, RegisterForEvent
from community.event.scheduling import ScheduleEvent
from community.meetup.attendance import ApproveAttendee, JoinMeetup, LeaveMeetup
from community.meetup.creation import OrganizeMeetup
from community.meetup.listing import browse_meetups, find_meetup
from community.meetup.meetup import AttendeeStatus, Meetup
from shared.listing import Page


def _page_fields(page: Page) -> dict:
    return {"total": page.total, "total_pages": page.total_pages, "current_page": page.page}


def _event_response(event: Event, with_registrations: bool = False) -> EventResponse:
    location = None
    if event.location:
        location = {
            "venue": event.location.venue,
            "address": event.location.address,
            "city": event.location.city,
            "state": event.location.state,
            "zip_code": event.location.zip_code,
            "is_online": bool(event.location.is_online),
            "online_link": event.location.online_link,
        }
    registrations = None
    if with_registrations:
        registrations = [
            {
                "user_id": str(r.user_id),
                "registered_at": r.registered_at,
                "status": r.status,
                "payment_status": r.payment_status,
            }
            for r in event.registrations
        ]
    return EventResponse(
        id=str(event.id),
        title=event.title,
        description=event.description,
        category=event.category,
        date=event.date,
        end_date=event.end_date,
        start_time=event.start_time,
        end_time=event.end_time,
        location=location,
        price=event.price or 0.0,
        capacity=event.capacity,
        available_spots=event.available_spots,
        organizer_name=event.organizer_name,
        organizer_email=event.organizer_email,
        featured=bool(event.featured),
        tags=json.loads(event.tags) if event.tags else [],
        registrations=registrations,
    )


def _meetup_response(meetup: Meetup, with_attendees: bool = False) -> MeetupResponse:
    attendees = None
    if with_attendees:
        attendees = [
            {"user_id": str(a.user_id), "joined_at": a.joined_at, "status": a.status} for a in meetup.attendees
        ]
    return MeetupResponse(
        id=str(meetup.id),
        title=meetup.title,
        description=meetup.description,
        organizer_id=str(meetup.organizer_id),
        category=meetup.category,
        date=meetup.date,
        start_time=meetup.start_time,
        end_time=meetup.end_time,
        venue=meetup.venue,
        city=meetup.city,
        is_online=bool(meetup.is_online),
        max_attendees=meetup.max_attendees,
        available_spots=meetup.available_spots,
        requires_approval=bool(meetup.requires_approval),
        tags=json.loads(meetup.tags) if meetup.tags else [],
        attendees=attendees,
    )


# ---------------------------------------------------------------------------
# Event Router
# ---------------------------------------------------------------------------
event_router = APIRouter(prefix="/events", tags=["events"])


@event_router.get("", response_model=EventListResponse)
async def list_events(
    category: str | None = None,
    search: str | None = None,
    upcoming: bool = True,
    sort: str = "date",
    order: str = "asc",
    page: int = 1,
    limit: int = 12,
) -> EventListResponse:
    result = browse_events(
        category=category,
        search=search,
        upcoming=upcoming,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    # Registrations are left out of listings
    return EventListResponse(items=[_event_response(e) for e in result.items], **_page_fields(result))


@event_router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str) -> EventResponse:
    return _event_response(find_event(event_id), with_registrations=True)


@event_router.post("", status_code=201, response_model=EventIdResponse)
async def schedule_event(body: ScheduleEventRequest) -> EventIdResponse:
    command = ScheduleEvent(
        title=body.title,
        description=body.description,
        category=body.category,
        date=body.date,
        end_date=body.end_date,
        start_time=body.start_time,
        end_time=body.end_time,
        location=json.dumps(body.location.model_dump()) if body.location else None,
        price=body.price,
        capacity=body.capacity,
        organizer_name=body.organizer_name,
        organizer_email=body.organizer_email,
        featured=body.featured,
        tags=json.dumps(body.tags),
        requirements=json.dumps(body.requirements),
    )
    event_id = current_domain.process(command, asynchronous=False)
    return EventIdResponse(event_id=event_id)


@event_router.post("/{event_id}/register", response_model=RegistrationChangeResponse)
async def register_for_event(event_id: str, body: ParticipantRequest) -> RegistrationChangeResponse:
    spots = current_domain.process(RegisterForEvent(event_id=event_id, user_id=body.user_id), asynchronous=False)
    return RegistrationChangeResponse(message="Successfully registered for event", available_spots=spots)


@event_router.delete("/{event_id}/register", response_model=RegistrationChangeResponse)
async def cancel_event_registration(event_id: str, user_id: str) -> RegistrationChangeResponse:
    command = CancelEventRegistration(event_id=event_id, user_id=user_id)
    spots = current_domain.process(command, asynchronous=False)
    return RegistrationChangeResponse(message="Registration cancelled successfully", available_spots=spots)


# ---------------------------------------------------------------------------
# Meetup Router
# ---------------------------------------------------------------------------
meetup_router = APIRouter(prefix="/meetups", tags=["meetups"])


@meetup_router.get("", response_model=MeetupListResponse)
async def list_meetups(
    category: str | None = None,
    search: str | None = None,
    upcoming: bool = True,
    sort: str = "date",
    order: str = "asc",
    page: int = 1,
    limit: int = 12,
) -> MeetupListResponse:
    result = browse_meetups(
        category=category,
        search=search,
        upcoming=upcoming,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return MeetupListResponse(items=[_meetup_response(m) for m in result.items], **_page_fields(result))


@meetup_router.get("/{meetup_id}", response_model=MeetupResponse)
async def get_meetup(meetup_id: str) -> MeetupResponse:
    return _meetup_response(find_meetup(meetup_id), with_attendees=True)


@meetup_router.post("", status_code=201, response_model=MeetupIdResponse)
async def organize_meetup(body: OrganizeMeetupRequest) -> MeetupIdResponse:
    command = OrganizeMeetup(
        organizer_id=body.organizer_id,
        title=body.title,
        description=body.description,
        category=body.category,
        date=body.date,
        max_attendees=body.max_attendees,
        start_time=body.start_time,
        end_time=body.end_time,
        venue=body.venue,
        address=body.address,
        city=body.city,
        is_online=body.is_online,
        online_link=body.online_link,
        is_public=body.is_public,
        requires_approval=body.requires_approval,
        tags=json.dumps(body.tags),
    )
    meetup_id = current_domain.process(command, asynchronous=False)
    return MeetupIdResponse(meetup_id=meetup_id)


@meetup_router.post("/{meetup_id}/join", response_model=JoinMeetupResponse)
async def join_meetup(meetup_id: str, body: ParticipantRequest) -> JoinMeetupResponse:
    status = current_domain.process(JoinMeetup(meetup_id=meetup_id, user_id=body.user_id), asynchronous=False)
    if status == AttendeeStatus.MAYBE.value:
        message = "Join request sent. Waiting for organizer approval."
    else:
        message = "Successfully joined meetup"
    return JoinMeetupResponse(message=message, status=status)


@meetup_router.delete("/{meetup_id}/join", response_model=MessageResponse)
async def leave_meetup(meetup_id: str, user_id: str) -> MessageResponse:
    current_domain.process(LeaveMeetup(meetup_id=meetup_id, user_id=user_id), asynchronous=False)
    return MessageResponse(message="Left meetup successfully")


@meetup_router.post("/{meetup_id}/attendees/{user_id}/approve", response_model=MessageResponse)
async def approve_attendee(meetup_id: str, user_id: str, body: ApproveAttendeeRequest) -> MessageResponse:
    command = ApproveAttendee(meetup_id=meetup_id, user_id=user_id, organizer_id=body.organizer_id)
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Attendee approved")
