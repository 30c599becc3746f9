"""Tests for cursor pagination."""

from __future__ import annotations

import pytest

from twenty_cli.builder.paginate import paginate
from twenty_cli.exceptions import ServerError
from twenty_cli.models import ListResult, PageInfo


def _page(items, has_next=False, cursor=None, with_info=True):
    info = PageInfo(hasNextPage=has_next, endCursor=cursor) if with_info else None
    return ListResult[str](data=items, totalCount=len(items), pageInfo=info)


class FakeList:
    """Serves pre-built pages and records the cursors it was asked for."""

    def __init__(self, pages):
        self.pages = list(pages)
        self.cursors = []

    def __call__(self, cursor):
        self.cursors.append(cursor)
        page = self.pages[len(self.cursors) - 1]
        if isinstance(page, Exception):
            raise page
        return page


class TestFetchAll:
    def test_concatenates_all_pages_in_order(self):
        fetch = FakeList(
            [
                _page(["a", "b"], True, "c1"),
                _page(["c"], True, "c2"),
                _page(["d"], False),
            ]
        )
        assert paginate(fetch, fetch_all=True) == ["a", "b", "c", "d"]
        assert fetch.cursors == ["", "c1", "c2"]

    def test_starts_from_given_cursor(self):
        fetch = FakeList([_page(["x"], False)])
        paginate(fetch, fetch_all=True, cursor="start")
        assert fetch.cursors == ["start"]

    def test_stops_without_page_info(self):
        fetch = FakeList([_page(["a"], with_info=False), _page(["never"])])
        assert paginate(fetch, fetch_all=True) == ["a"]
        assert len(fetch.cursors) == 1

    def test_stops_when_no_next_page_even_with_cursor(self):
        fetch = FakeList([_page(["a"], False, "stale"), _page(["never"])])
        assert paginate(fetch, fetch_all=True) == ["a"]
        assert len(fetch.cursors) == 1

    def test_stops_when_end_cursor_missing(self):
        fetch = FakeList([_page(["a"], True, None), _page(["never"])])
        assert paginate(fetch, fetch_all=True) == ["a"]
        assert len(fetch.cursors) == 1

    def test_empty_pages(self):
        fetch = FakeList([_page([], True, "c1"), _page([], False)])
        assert paginate(fetch, fetch_all=True) == []
        assert len(fetch.cursors) == 2


class TestSinglePage:
    def test_one_call_regardless_of_page_info(self):
        fetch = FakeList([_page(["a"], True, "c1"), _page(["b"])])
        assert paginate(fetch, fetch_all=False) == ["a"]
        assert fetch.cursors == [""]


class TestErrors:
    def test_error_propagates_unwrapped(self):
        boom = ServerError("HTTP 500", status_code=500)
        fetch = FakeList([_page(["a"], True, "c1"), boom])
        with pytest.raises(ServerError) as excinfo:
            paginate(fetch, fetch_all=True)
        assert excinfo.value is boom

    def test_debug_reports_pages(self, capsys):
        from twenty_cli.output import OutputManager, set_output

        set_output(OutputManager(no_color=True, verbose=True))
        paginate(FakeList([_page(["a"], True, "c1"), _page(["b"])]), fetch_all=True)
        err = capsys.readouterr().err
        assert "page 1: 1 record(s), 1 so far" in err
        assert "page 2: 1 record(s), 2 so far" in err
