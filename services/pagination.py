"""
Pagination, sorting and text search shared by every list endpoint.

Everything here is pure: helpers build SQLAlchemy expressions and plain
dicts, the services execute them.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, cast, func, or_

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_MAX_LIMIT = 100
# largest OFFSET a signed 64-bit database integer holds
MAX_OFFSET = 2 ** 63 - 1
SORT_ORDERS = ("asc", "desc")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int
    skip: int
    sort_by: str
    sort_order: str


def _to_int(value: Any) -> Optional[int]:
    """Leading-integer parse: 3 -> 3, "12abc" -> 12, "abc" -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def parse_params(query: Mapping[str, Any], default_sort_field: str = "createdAt",
                 max_limit: int = DEFAULT_MAX_LIMIT) -> PaginationParams:
    """
    Normalize raw list parameters. Never raises: bad values fall back to defaults.

    page < 1 or non-numeric -> 1; limit < 1 or non-numeric -> 10,
    limit > max_limit -> max_limit; page is capped so skip <= MAX_OFFSET;
    sort_order outside asc/desc -> desc.
    """
    page = _to_int(query.get("page"))
    if page is None or page < 1:
        page = DEFAULT_PAGE

    limit = _to_int(query.get("limit"))
    if limit is None or limit < 1:
        limit = DEFAULT_LIMIT
    if limit > max_limit:
        limit = max_limit
    max_page = MAX_OFFSET // limit + 1
    if page > max_page:
        page = max_page

    sort_order = query.get("sort_order")
    if sort_order not in SORT_ORDERS:
        sort_order = "desc"

    sort_by = query.get("sort_by") or default_sort_field

    return PaginationParams(
        page=page,
        limit=limit,
        skip=(page - 1) * limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def build_text_search_filter(term: Optional[str], columns: Iterable):
    """OR of case-insensitive substring matches over columns; None for a blank term."""
    if term is None or not term.strip():
        return None
    needle = term.strip().lower()
    clauses = []
    for column in columns:
        # enum columns compare as text, otherwise the term is coerced into the enum
        expr = cast(column, String) if isinstance(column.type, SAEnum) else column
        clauses.append(func.lower(expr).contains(needle, autoescape=True))
    if not clauses:
        return None
    return or_(*clauses)


def build_order_by(column, sort_order: str):
    return column.asc() if sort_order == "asc" else column.desc()


def build_metadata(page: int, limit: int, total: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def build_result(data: List[Any], page: int, limit: int, total: int) -> Dict[str, Any]:
    return {"data": data, "pagination": build_metadata(page, limit, total)}
