"""Cursor pagination over a list call."""

from __future__ import annotations

from typing import Callable, TypeVar

from twenty_cli.models import ListResult
from twenty_cli.output import get_output

T = TypeVar("T")


def paginate(
    fetch: Callable[[str], ListResult[T]],
    fetch_all: bool,
    cursor: str = "",
) -> list[T]:
    """Call *fetch* page by page and concatenate the records.

    A single page is fetched unless *fetch_all* is set; then pages are
    followed while ``page_info.has_next_page`` is true and an end cursor is
    present. A page that reports a next page without an end cursor ends the
    walk as well. Errors from *fetch* propagate unchanged and discard the
    pages collected so far.

    There is no page limit: a server that keeps reporting further pages
    keeps being asked for them.

    Args:
        fetch: Returns the page starting after the given cursor (``""``
            for the first page).
        fetch_all: Follow pagination to the end.
        cursor: Cursor to start from.

    Returns:
        All records visited, in server order.
    """
    output = get_output()
    collected: list[T] = []
    pages = 0
    while True:
        page = fetch(cursor)
        pages += 1
        collected.extend(page.data)
        output.debug(f"page {pages}: {len(page.data)} record(s), {len(collected)} so far")

        info = page.page_info
        if not fetch_all or info is None or not info.has_next_page or not info.end_cursor:
            return collected
        cursor = info.end_cursor
        output.progress(f"Fetched {len(collected)} records...")
