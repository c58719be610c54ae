"""
Public catalog browsing: published-only listing, search, filters and sorting.
"""
from dataclasses import dataclass, field
from typing import Iterable, Optional

from apps.core.exceptions import InvalidInput

from .entities import Product, parse_price

SORT_RELEVANCE = 'relevance'
SORT_PRICE_ASC = 'price_asc'
SORT_PRICE_DESC = 'price_desc'
SORT_TITLE_ASC = 'title_asc'

SORT_CHOICES = (SORT_RELEVANCE, SORT_PRICE_ASC, SORT_PRICE_DESC, SORT_TITLE_ASC)


@dataclass
class CatalogQuery:
    """Filters applied to the product list."""
    search: str = ''
    category_ids: list[str] = field(default_factory=list)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort: str = SORT_RELEVANCE
    published_only: bool = False

    @classmethod
    def from_params(cls, params) -> 'CatalogQuery':
        """Build a query from request GET parameters (a QueryDict or plain dict)."""
        if hasattr(params, 'getlist'):
            categories = params.getlist('category')
        else:
            categories = params.get('category') or []
            if isinstance(categories, str):
                categories = [categories]

        sort = params.get('sort') or SORT_RELEVANCE
        if sort not in SORT_CHOICES:
            raise InvalidInput(f'Unknown sort: {sort!r}')

        published = str(params.get('published', '')).lower()

        return cls(
            search=(params.get('q') or '').strip(),
            category_ids=[c for c in categories if c],
            min_price=parse_price(params.get('min_price'), required=False),
            max_price=parse_price(params.get('max_price'), required=False),
            sort=sort,
            published_only=published in ('1', 'true', 'yes'),
        )


def published(products: Iterable[Product]) -> list[Product]:
    return [p for p in products if p.is_published]


def filter_products(products: Iterable[Product], query: CatalogQuery) -> list[Product]:
    """Apply a CatalogQuery, keeping the stored order for 'relevance'."""
    items = published(products) if query.published_only else list(products)

    if query.search:
        needle = query.search.lower()
        items = [p for p in items if needle in p.title.lower()]

    if query.category_ids:
        wanted = set(query.category_ids)
        items = [p for p in items if p.category_id in wanted]

    if query.min_price is not None:
        items = [p for p in items if p.price >= query.min_price]
    if query.max_price is not None:
        items = [p for p in items if p.price <= query.max_price]

    if query.sort == SORT_PRICE_ASC:
        items.sort(key=lambda p: p.price)
    elif query.sort == SORT_PRICE_DESC:
        items.sort(key=lambda p: p.price, reverse=True)
    elif query.sort == SORT_TITLE_ASC:
        items.sort(key=lambda p: p.title.casefold())

    return items


def category_counts(products: Iterable[Product]) -> dict[str, int]:
    """Number of products per category id (uncategorized products are skipped)."""
    counts = {}
    for product in products:
        if product.category_id:
            counts[product.category_id] = counts.get(product.category_id, 0) + 1
    return counts


def max_price(products: Iterable[Product]) -> float:
    return max((p.price for p in products), default=0.0)


def name_map(entities: Iterable) -> dict[str, str]:
    """Map entity ids to names for resolving loose references."""
    return {e.id: e.name for e in entities}


def resolve_name(names: dict[str, str], entity_id: Optional[str]) -> Optional[str]:
    """Name for an id, or None when the id is empty or dangling."""
    if not entity_id:
        return None
    return names.get(entity_id)
