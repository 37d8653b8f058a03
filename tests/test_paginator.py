"""日志分页测试"""

import pytest

from relay_core.exceptions import InvalidParameterException
from relay_core.session.paginator import LogPaginator, PageNavigation


class TestPageNavigation:
    """分页计算测试（total=25, page_size=10）"""

    def test_first_page(self):
        nav = PageNavigation(page=1, page_size=10, total=25)

        assert nav.total_pages == 3
        assert nav.item_range == (1, 10)
        assert nav.has_previous is False
        assert nav.has_next is True
        assert nav.needs_pagination is True

    def test_middle_page(self):
        nav = PageNavigation(page=2, page_size=10, total=25)

        assert nav.item_range == (11, 20)
        assert nav.has_previous is True
        assert nav.has_next is True

    def test_last_page(self):
        nav = PageNavigation(page=3, page_size=10, total=25)

        assert nav.item_range == (21, 25)
        assert nav.has_previous is True
        assert nav.has_next is False

    def test_single_page(self):
        nav = PageNavigation(page=1, page_size=10, total=7)

        assert nav.total_pages == 1
        assert nav.has_next is False
        assert nav.needs_pagination is False

    def test_empty(self):
        nav = PageNavigation(page=1, page_size=10, total=0)

        assert nav.total_pages == 0
        assert nav.item_range == (0, 0)
        assert nav.has_previous is False
        assert nav.has_next is False

    def test_exact_multiple(self):
        nav = PageNavigation(page=2, page_size=10, total=20)

        assert nav.total_pages == 2
        assert nav.has_next is False


class TestLogPaginator:
    """日志分页获取测试"""

    @pytest.mark.asyncio
    async def test_fetch_page(self, backend):
        page = await LogPaginator(backend).fetch_page("s1", 3, 10)

        assert backend.log_requests == [("s1", 3, 10)]
        assert page.page == 3
        assert [item.id for item in page.items] == ["21", "22", "23", "24", "25"]

    @pytest.mark.asyncio
    async def test_default_page_size(self, backend):
        await LogPaginator(backend).fetch_page("s1")

        assert backend.log_requests == [("s1", 1, 10)]

    @pytest.mark.asyncio
    async def test_refetch_is_not_cached(self, backend):
        paginator = LogPaginator(backend)

        await paginator.fetch_page("s1", 1)
        await paginator.fetch_page("s1", 1)

        assert backend.calls["get_station_logs"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page,page_size", [(0, 10), (-1, 10), (1, 0)])
    async def test_invalid_arguments(self, backend, page, page_size):
        with pytest.raises(InvalidParameterException):
            await LogPaginator(backend).fetch_page("s1", page, page_size)
        assert backend.calls["get_station_logs"] == 0
