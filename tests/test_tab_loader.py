"""标签页加载测试"""

import asyncio

import pytest

from relay_core.exceptions import InvalidParameterException
from relay_core.session.tab_loader import TabDataLoader, TabStatus, ViewId


class CountingFetch:
    def __init__(self, result="data", error=None):
        self.count = 0
        self.result = result
        self.error = error

    async def __call__(self):
        self.count += 1
        await asyncio.sleep(0)
        if self.error:
            raise self.error
        return self.result


class TestTabDataLoader:
    """标签页加载测试"""

    @pytest.mark.asyncio
    async def test_load_once(self):
        """同一标签页选择两次只请求一次"""
        loader = TabDataLoader()
        loaded: set = set()
        fetch = CountingFetch(["token"])

        first = await loader.ensure_loaded(ViewId.TOKENS, loaded, fetch)
        second = await loader.ensure_loaded("tokens", loaded, fetch)

        assert fetch.count == 1
        assert first.status == TabStatus.LOADED
        assert first.data == ["token"]
        assert second.status == TabStatus.CACHED
        assert loaded == {ViewId.TOKENS}

    @pytest.mark.asyncio
    async def test_failure_not_marked_loaded(self):
        """失败的标签页不加入集合，下次重新请求"""
        loader = TabDataLoader()
        loaded: set = set()
        failing = CountingFetch(error=RuntimeError("down"))

        result = await loader.ensure_loaded(ViewId.LOGS, loaded, failing)

        assert result.status == TabStatus.FAILED
        assert str(result.error) == "down"
        assert loaded == set()

        retry = CountingFetch("page")
        result = await loader.ensure_loaded(ViewId.LOGS, loaded, retry)
        assert result.status == TabStatus.LOADED
        assert retry.count == 1
        assert loaded == {ViewId.LOGS}

    @pytest.mark.asyncio
    async def test_failure_isolated_from_other_views(self):
        loader = TabDataLoader()
        loaded = {ViewId.INFO}

        await loader.ensure_loaded(ViewId.TOKENS, loaded, CountingFetch(error=RuntimeError("x")))
        await loader.ensure_loaded(ViewId.LOGS, loaded, CountingFetch("page"))

        assert loaded == {ViewId.INFO, ViewId.LOGS}

    @pytest.mark.asyncio
    async def test_views_without_fetch(self):
        loader = TabDataLoader()
        loaded: set = set()

        result = await loader.ensure_loaded(ViewId.SETTINGS, loaded, None)

        assert result.status == TabStatus.LOADED
        assert ViewId.SETTINGS in loaded

    @pytest.mark.asyncio
    async def test_concurrent_selection_shares_request(self):
        loader = TabDataLoader()
        loaded: set = set()
        fetch = CountingFetch(["token"])

        first, second = await asyncio.gather(
            loader.ensure_loaded(ViewId.TOKENS, loaded, fetch),
            loader.ensure_loaded(ViewId.TOKENS, loaded, fetch),
        )

        assert fetch.count == 1
        assert {first.status, second.status} == {TabStatus.LOADED, TabStatus.CACHED}

    @pytest.mark.asyncio
    async def test_stale_result_discarded(self):
        loader = TabDataLoader()
        loaded: set = set()

        result = await loader.ensure_loaded(
            ViewId.TOKENS, loaded, CountingFetch(["token"]), is_current=lambda: False
        )

        assert result.status == TabStatus.SKIPPED
        assert loaded == set()

    @pytest.mark.asyncio
    async def test_unknown_view(self):
        with pytest.raises(InvalidParameterException):
            await TabDataLoader().ensure_loaded("billing", set(), None)
