"""Pagination helper shared by every list endpoint.

Query parameters arrive as raw strings and are parsed leniently: a leading
integer is used when present, anything else falls back to the defaults.
"""
import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

from eventrsvp.config import settings

T = TypeVar("T")

DEFAULT_PAGE = 1

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Page:
    offset: int
    limit: int
    page: int
    total_pages: int


def _parse_positive(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    match = _LEADING_INT.match(str(raw))
    if not match:
        return default
    value = int(match.group(1))
    return value if value > 0 else default


def total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)


def paginate(raw_page: Optional[str], raw_limit: Optional[str], total: int) -> Page:
    """Normalize raw page/limit parameters into an offset window over ``total`` items."""
    page = _parse_positive(raw_page, DEFAULT_PAGE)
    limit = min(_parse_positive(raw_limit, settings.DEFAULT_PAGE_LIMIT), settings.MAX_PAGE_LIMIT)
    return Page(
        offset=(page - 1) * limit,
        limit=limit,
        page=page,
        total_pages=total_pages(total, limit),
    )


def slice_page(items: Sequence[T], window: Page) -> list[T]:
    """Return the items inside ``window``; out-of-range pages yield an empty list."""
    return list(items[window.offset:window.offset + window.limit])
