"""
Cursor pagination support for deelcli.

This module provides the page containers returned by the API client and the
aggregation helper every list command uses to fetch either one page (leaving the
cursor to the caller) or every page of a collection.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from ._logging import logger, redact
from .exceptions import PaginationLimitError

T = TypeVar("T")

# Hard cap on pages fetched by a single --all invocation.
MAX_PAGES = 100

DEFAULT_PAGE_SIZE = 100


@dataclass
class Page(Generic[T]):
    """
    Represents a single page of results with pagination cursor.

    Attributes:
        items: Records returned for this page, in API order
        next_cursor: Cursor for the next page ("" if no more pages)
        total: Server-reported total across all pages (0 if unknown)
    """

    items: list[T] = field(default_factory=list)
    next_cursor: str = ""
    total: int = 0

    @property
    def has_more(self) -> bool:
        """Returns True if there are more pages available."""
        return self.next_cursor != ""


@dataclass
class AggregationResult(Generic[T]):
    """
    Output of aggregate().

    Attributes:
        items: One page's items, or every page's items concatenated in fetch order
        total: Last non-zero total reported by any fetched page
        has_more: True only in single-page mode when the page had a next cursor
        next_cursor: Cursor to resume from in single-page mode ("" when aggregating)
        pages_fetched: Number of successful fetch calls
    """

    items: list[T] = field(default_factory=list)
    total: int = 0
    has_more: bool = False
    next_cursor: str = ""
    pages_fetched: int = 0


FetchPage = Callable[[str, int], Page[T]]


def aggregate(
    fetch_page: FetchPage[T],
    aggregate_all: bool,
    start_cursor: str = "",
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    max_pages: int = MAX_PAGES,
) -> AggregationResult[T]:
    """
    Walks a cursor-paginated source one step or to exhaustion.

    In single-page mode fetch_page is called exactly once and its page is
    returned as-is. With aggregate_all the cursor chain is followed until a page
    has no next cursor. Any exception raised by fetch_page propagates unchanged
    and nothing fetched so far is returned. When max_pages pages have been
    fetched and a cursor is still pending, PaginationLimitError is raised and the
    accumulated items are discarded.

    Args:
        fetch_page: Callable taking (cursor, page_size) and returning a Page
        aggregate_all: Fetch every page instead of just one
        start_cursor: Cursor of the first page to fetch ("" for the beginning)
        page_size: Passed through to fetch_page; not validated here
        max_pages: Safety bound on the number of fetches when aggregating

    Usage:
        result = aggregate(
            lambda cursor, limit: client.list_people(cursor=cursor, limit=limit),
            aggregate_all=True,
        )
    """
    items: list[T] = []
    total = 0
    pages_fetched = 0
    cursor = start_cursor

    while True:
        logger.debug(
            "Fetching page",
            extra={
                "cursor_hash": redact(cursor),
                "page_size": page_size,
                "page_number": pages_fetched + 1,
                "aggregate": aggregate_all,
            },
        )
        page = fetch_page(cursor, page_size)
        pages_fetched += 1

        if not aggregate_all:
            return AggregationResult(
                items=page.items,
                total=page.total,
                has_more=page.has_more,
                next_cursor=page.next_cursor,
                pages_fetched=pages_fetched,
            )

        items.extend(page.items)
        if page.total > 0:
            total = page.total

        if not page.next_cursor:
            logger.info(
                "Aggregation complete",
                extra={"pages": pages_fetched, "items": len(items), "total": total},
            )
            return AggregationResult(items=items, total=total, pages_fetched=pages_fetched)

        if pages_fetched >= max_pages:
            logger.warning(
                "Pagination safety limit reached",
                extra={"pages": pages_fetched, "max_pages": max_pages},
            )
            raise PaginationLimitError(max_pages)

        cursor = page.next_cursor
