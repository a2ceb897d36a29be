"""Read side for a buyer's orders."""

from protean.utils.globals import current_domain

from shared.listing import Page, paginate
from storefront.order.order import Order

ORDERS_PAGE_SIZE = 10


def orders_for_user(user_id, page: int = 1, limit: int = ORDERS_PAGE_SIZE, status: str | None = None) -> Page:
    """The user's orders, newest first."""
    queryset = current_domain.repository_for(Order)._dao.query.filter(user_id=str(user_id))
    if status:
        queryset = queryset.filter(status=status)
    return paginate(queryset.order_by("-created_at"), page=page, limit=limit)
