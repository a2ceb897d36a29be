"""Read side of the catalog: browsing, lookup and category listing."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.query import Q

from shared.listing import DEFAULT_PAGE_SIZE, Page, paginate
from storefront.product.product import Product, ProductCategory

SORTABLE_FIELDS = {"created_at", "price", "name", "stock"}


def _ordering(sort: str, order: str) -> str:
    field = sort if sort in SORTABLE_FIELDS else "created_at"
    return field if order == "asc" else f"-{field}"


def browse_products(
    category: str | None = None,
    search: str | None = None,
    featured: bool | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    sort: str = "created_at",
    order: str = "desc",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Page:
    """Active products matching the filters, one page at a time."""
    queryset = current_domain.repository_for(Product)._dao.query.filter(is_active=True)

    if category:
        queryset = queryset.filter(category=category)
    if featured is not None:
        queryset = queryset.filter(featured=featured)
    if min_price is not None:
        queryset = queryset.filter(price__gte=min_price)
    if max_price is not None:
        queryset = queryset.filter(price__lte=max_price)
    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(description__icontains=search))

    return paginate(queryset.order_by(_ordering(sort, order)), page=page, limit=limit)


def find_product(product_id: str) -> Product:
    """Fetch an active product, treating deactivated ones as missing."""
    product = current_domain.repository_for(Product).get(product_id)
    if not product.is_active:
        raise ObjectNotFoundError({"_entity": f"Product not found: {product_id}"})
    return product


def list_categories() -> list[str]:
    return [category.value for category in ProductCategory]
