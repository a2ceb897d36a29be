"""Read side for events: the calendar listing and event lookup."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.query import Q

from community.event.event import Event
from shared.clock import utc_now
from shared.listing import DEFAULT_PAGE_SIZE, Page, paginate

SORTABLE_FIELDS = {"date", "price", "title", "created_at"}


def browse_events(
    category: str | None = None,
    search: str | None = None,
    upcoming: bool = True,
    sort: str = "date",
    order: str = "asc",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    now=None,
) -> Page:
    """Active events, soonest first unless asked otherwise."""
    queryset = current_domain.repository_for(Event)._dao.query.filter(is_active=True)

    if category:
        queryset = queryset.filter(category=category)
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))
    if upcoming:
        queryset = queryset.filter(date__gte=utc_now(now))

    field = sort if sort in SORTABLE_FIELDS else "date"
    return paginate(queryset.order_by(field if order == "asc" else f"-{field}"), page=page, limit=limit)


def find_event(event_id) -> Event:
    """Fetch an active event, treating deactivated ones as missing."""
    event = current_domain.repository_for(Event).get(event_id)
    if not event.is_active:
        raise ObjectNotFoundError({"_entity": "Event not found"})
    return event
