"""Read side for meetups."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.query import Q

from community.meetup.meetup import Meetup
from shared.clock import utc_now
from shared.listing import DEFAULT_PAGE_SIZE, Page, paginate

SORTABLE_FIELDS = {"date", "title", "created_at"}


def browse_meetups(
    category: str | None = None,
    search: str | None = None,
    upcoming: bool = True,
    sort: str = "date",
    order: str = "asc",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    now=None,
) -> Page:
    queryset = current_domain.repository_for(Meetup)._dao.query.filter(is_active=True, is_public=True)

    if category:
        queryset = queryset.filter(category=category)
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))
    if upcoming:
        queryset = queryset.filter(date__gte=utc_now(now))

    field = sort if sort in SORTABLE_FIELDS else "date"
    return paginate(queryset.order_by(field if order == "asc" else f"-{field}"), page=page, limit=limit)


def find_meetup(meetup_id) -> Meetup:
    meetup = current_domain.repository_for(Meetup).get(meetup_id)
    if not meetup.is_active:
        raise ObjectNotFoundError({"_entity": "Meetup not found"})
    return meetup
