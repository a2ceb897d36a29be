"""Read side for offers: the public promotions page and code lookup."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from shared.clock import utc_now
from shared.listing import DEFAULT_PAGE_SIZE, SCAN_LIMIT, Page, paginate, paginate_items
from storefront.offer.offer import REASON_NOT_ACTIVE, Offer
from storefront.offer.validation import find_offer_by_code

SORTABLE_FIELDS = {"created_at", "end_date", "start_date", "value"}


def browse_offers(
    discount_type: str | None = None,
    category: str | None = None,
    sort: str = "created_at",
    order: str = "desc",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    now=None,
) -> Page:
    """Public offers whose window includes `now`."""
    now = utc_now(now)
    queryset = current_domain.repository_for(Offer)._dao.query.filter(
        is_active=True,
        is_public=True,
        start_date__lte=now,
        end_date__gte=now,
    )
    if discount_type:
        queryset = queryset.filter(discount_type=discount_type)

    field = sort if sort in SORTABLE_FIELDS else "created_at"
    queryset = queryset.order_by(field if order == "asc" else f"-{field}")

    if category:
        # Category scope is a JSON array column, so it is matched in memory
        scoped = [o for o in queryset.limit(SCAN_LIMIT).all().items if category in o.category_scope]
        return paginate_items(scoped, page=page, limit=limit)

    return paginate(queryset, page=page, limit=limit)


def current_offer(code: str, now=None) -> Offer:
    """Look up an offer that can be used right now."""
    offer = find_offer_by_code(code)
    if not offer.is_valid(now):
        raise ValidationError({"code": [REASON_NOT_ACTIVE]})
    return offer
