import math
import re
from typing import Any, Dict, List, Optional, Sequence

from .errors import invalid
from .models import Product

# Read-only views over the store: listing, search and stats.
# Nothing here mutates the records it is given.

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _to_positive_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    # leading digits count, so "2.5" and "3abc" read as 2 and 3
    match = _LEADING_INT.match(raw)
    if match is None:
        return default
    try:
        value = int(match.group(1))
    except ValueError:
        # more digits than int() will parse
        return default
    return value if value >= 1 else default


def paginate(items: Sequence[Product], page: Optional[str] = None, limit: Optional[str] = None) -> Dict[str, Any]:
    page_n = _to_positive_int(page, DEFAULT_PAGE)
    limit_n = _to_positive_int(limit, DEFAULT_LIMIT)
    start = (page_n - 1) * limit_n
    window = list(items[start:start + limit_n])
    total = len(items)
    return {
        "count": len(window),
        "total": total,
        "page": page_n,
        "totalPages": math.ceil(total / limit_n),
        "data": [p.to_json() for p in window],
    }


def list_products(
    products: Sequence[Product],
    category: Optional[str] = None,
    in_stock: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
) -> Dict[str, Any]:
    out: List[Product] = []
    wanted_stock = None if in_stock is None else in_stock == "true"
    for p in products:
        if category and p.category.lower() != category.lower():
            continue
        if wanted_stock is not None and p.in_stock != wanted_stock:
            continue
        out.append(p)
    return paginate(out, page, limit)


def search_products(products: Sequence[Product], q: Optional[str]) -> Dict[str, Any]:
    if not q:
        raise invalid('Search query parameter "q" is required')
    term = q.lower()
    results = [
        p for p in products
        if term in p.name.lower() or term in p.description.lower()
    ]
    return {"count": len(results), "query": q, "data": [p.to_json() for p in results]}


def product_stats(products: Sequence[Product]) -> Dict[str, Any]:
    by_category: Dict[str, int] = {}
    in_stock = 0
    total_price = 0.0
    for p in products:
        by_category[p.category] = by_category.get(p.category, 0) + 1
        if p.in_stock:
            in_stock += 1
        total_price += p.price

    count = len(products)
    return {
        "totalProducts": count,
        "inStock": in_stock,
        "outOfStock": count - in_stock,
        "byCategory": by_category,
        "averagePrice": round(total_price / count, 2) if count else 0,
        "totalValue": round(total_price, 2),
    }
