"""
Script: imagebuilder_tools/pagination.py
What: Reduces a token-paged listing to its single highest item.
Doing: Fetches pages one after another, starting with no token, and keeps only the best item seen so far.
Why: List APIs return unordered pages, and we only ever need the maximum.
Goal: Select the same item no matter how the listing is split into pages.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Sequence, Tuple, TypeVar

from imagebuilder_tools.common import EmptyResultError


T = TypeVar("T")

# One call of a list API: takes the previous `nextToken` (None for the first
# page) and returns that page's items plus the token for the next page.
PageFetcher = Callable[[Optional[str]], Tuple[Sequence[T], Optional[str]]]


def iter_pages(fetch_page: PageFetcher[T]) -> Iterator[Sequence[T]]:
    """Yield pages until the service stops returning a `nextToken`."""
    next_token: Optional[str] = None
    while True:
        items, next_token = fetch_page(next_token)
        yield items
        # Some APIs send an empty string rather than omitting the token.
        if not next_token:
            return


def select_max(fetch_page: PageFetcher[T], key: Callable[[T], Any]) -> T:
    """
    Return the item with the highest `key` across every page.

    Ties: the first maximal item in listing order is kept. Within a page
    `max()` keeps the first maximal item, and a later page only replaces the
    running best when its own best is strictly greater.

    Errors raised by `key` (for example `MalformedVersionError`) abort the
    whole selection. An empty page is fine; no items at all raises
    `EmptyResultError`.
    """
    best: Optional[T] = None
    best_key: Any = None
    for items in iter_pages(fetch_page):
        if not items:
            continue
        keyed = [(key(item), item) for item in items]
        page_key, page_best = max(keyed, key=lambda pair: pair[0])
        if best is None or page_key > best_key:
            best, best_key = page_best, page_key

    if best is None:
        raise EmptyResultError("Listing returned no items")
    return best
