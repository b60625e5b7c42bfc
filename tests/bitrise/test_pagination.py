"""Unit tests for the cursor pagination driver."""

import pytest

from bitrise_publisher.bitrise.pagination import find_first
from bitrise_publisher.bitrise.types import RemotePage


class PageStub:
    """Serves fixed pages keyed by cursor and records every request."""

    def __init__(self, pages: dict):
        self.pages = pages
        self.requested: list = []

    async def __call__(self, cursor):
        self.requested.append(cursor)
        return self.pages[cursor]


def _three_pages() -> PageStub:
    return PageStub({
        None: RemotePage(items=list(range(0, 10)), next_cursor="p2"),
        "p2": RemotePage(items=list(range(10, 20)), next_cursor="p3"),
        "p3": RemotePage(items=list(range(20, 30)), next_cursor=None),
    })


class TestFindFirst:
    @pytest.mark.asyncio
    async def test_match_on_page_two_never_requests_page_three(self):
        stub = _three_pages()
        result = await find_first(stub, lambda n: n == 15)

        assert result == 15
        assert stub.requested == [None, "p2"]

    @pytest.mark.asyncio
    async def test_returns_first_match_in_page_order(self):
        stub = _three_pages()
        assert await find_first(stub, lambda n: n % 7 == 6) == 6
        assert stub.requested == [None]

    @pytest.mark.asyncio
    async def test_single_page_without_cursor_and_no_match(self):
        stub = PageStub({None: RemotePage(items=[1, 2, 3], next_cursor=None)})

        assert await find_first(stub, lambda n: n > 100) is None
        assert stub.requested == [None]

    @pytest.mark.asyncio
    async def test_scans_every_page_when_nothing_matches(self):
        stub = _three_pages()
        assert await find_first(stub, lambda n: False) is None
        assert stub.requested == [None, "p2", "p3"]

    @pytest.mark.asyncio
    async def test_empty_pages_are_followed(self):
        stub = PageStub({
            None: RemotePage(items=[], next_cursor="p2"),
            "p2": RemotePage(items=["x"], next_cursor=None),
        })
        assert await find_first(stub, lambda s: s == "x") == "x"

    @pytest.mark.asyncio
    async def test_repeated_cursor_stops_search(self):
        stub = PageStub({
            None: RemotePage(items=[1], next_cursor="loop"),
            "loop": RemotePage(items=[2], next_cursor="loop"),
        })
        assert await find_first(stub, lambda n: n > 5) is None
        assert stub.requested == [None, "loop"]

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate_without_retry(self):
        calls = []

        async def failing(cursor):
            calls.append(cursor)
            raise RuntimeError("service down")

        with pytest.raises(RuntimeError, match="service down"):
            await find_first(failing, lambda n: True)
        assert calls == [None]
