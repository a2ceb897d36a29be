"""Pydantic request/response schemas for the Community API."""

from datetime import datetime

from pydantic import BaseModel, Field


class LocationSchema(BaseModel):
    venue: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    is_online: bool = False
    online_link: str | None = None


class ParticipantRequest(BaseModel):
    user_id: str


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
class ScheduleEventRequest(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    description: str
    category: str
    date: datetime
    end_date: datetime | None = None
    start_time: str | None = None
    end_time: str | None = None
    location: LocationSchema | None = None
    price: float = Field(ge=0, default=0.0)
    capacity: int = Field(ge=1)
    organizer_name: str | None = None
    organizer_email: str | None = None
    featured: bool = False
    tags: list[str] = []
    requirements: list[str] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Introduction to Print Design",
                    "description": "Learn the fundamentals of print design",
                    "category": "workshop",
                    "date": "2026-11-20T14:00:00Z",
                    "start_time": "14:00",
                    "end_time": "17:00",
                    "location": {"venue": "Planet Scribbles Studio", "city": "Design City"},
                    "price": 49.99,
                    "capacity": 20,
                }
            ]
        }
    }


class EventIdResponse(BaseModel):
    event_id: str


class RegistrationResponse(BaseModel):
    user_id: str
    registered_at: datetime
    status: str
    payment_status: str


class EventResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    date: datetime
    end_date: datetime | None = None
    start_time: str | None = None
    end_time: str | None = None
    location: LocationSchema | None = None
    price: float
    capacity: int
    available_spots: int
    organizer_name: str | None = None
    organizer_email: str | None = None
    featured: bool = False
    tags: list[str] = []
    registrations: list[RegistrationResponse] | None = None


class EventListResponse(BaseModel):
    items: list[EventResponse]
    total: int
    total_pages: int
    current_page: int


class RegistrationChangeResponse(BaseModel):
    message: str
    available_spots: int


# ---------------------------------------------------------------------------
# Meetups
# ---------------------------------------------------------------------------
class OrganizeMeetupRequest(BaseModel):
    organizer_id: str
    title: str = Field(min_length=3, max_length=200)
    description: str
    category: str
    date: datetime
    max_attendees: int = Field(ge=2)
    start_time: str | None = None
    end_time: str | None = None
    venue: str | None = None
    address: str | None = None
    city: str | None = None
    is_online: bool = False
    online_link: str | None = None
    is_public: bool = True
    requires_approval: bool = False
    tags: list[str] = []


class MeetupIdResponse(BaseModel):
    meetup_id: str


class AttendeeResponse(BaseModel):
    user_id: str
    joined_at: datetime
    status: str


class MeetupResponse(BaseModel):
    id: str
    title: str
    description: str
    organizer_id: str
    category: str
    date: datetime
    start_time: str | None = None
    end_time: str | None = None
    venue: str | None = None
    city: str | None = None
    is_online: bool = False
    max_attendees: int
    available_spots: int
    requires_approval: bool = False
    tags: list[str] = []
    attendees: list[AttendeeResponse] | None = None


class MeetupListResponse(BaseModel):
    items: list[MeetupResponse]
    total: int
    total_pages: int
    current_page: int


class JoinMeetupResponse(BaseModel):
    message: str
    status: str


class ApproveAttendeeRequest(BaseModel):
    organizer_id: str


class MessageResponse(BaseModel):
    message: str
