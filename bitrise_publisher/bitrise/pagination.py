"""Cursor pagination driver shared by the build and artifact searches.

find_first() fetches one page at a time, starting without a cursor, and
stops at the first accepted item. Later pages are never requested once a
match is found. Errors from fetch_page propagate without retry.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

from bitrise_publisher.bitrise.types import RemotePage

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[Optional[str]], Awaitable[RemotePage[T]]]


async def find_first(
    fetch_page: PageFetcher[T],
    accept: Callable[[T], bool],
) -> Optional[T]:
    """Return the first item across all pages for which accept() is true.

    Returns None when the last page (no next cursor) has been scanned
    without a match. A cursor that was already requested also ends the
    search, so the scan always moves forward and terminates.
    """
    cursor: Optional[str] = None
    seen: set[str] = set()
    pages = 0

    while True:
        page = await fetch_page(cursor)
        pages += 1

        for item in page.items:
            if accept(item):
                logger.debug("Match found on page %d", pages)
                return item

        if page.next_cursor is None:
            break
        if page.next_cursor in seen:
            logger.warning(
                "Cursor %r repeated after %d pages; stopping pagination",
                page.next_cursor, pages,
            )
            break

        seen.add(page.next_cursor)
        cursor = page.next_cursor

    logger.debug("No match after %d pages", pages)
    return None
