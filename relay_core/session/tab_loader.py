"""
标签页数据加载
每个会话维护一个已加载视图集合，同一视图只加载一次
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from relay_core.exceptions import InvalidParameterException
from relay_core.utils.logger import get_logger

logger = get_logger(__name__)


class ViewId(str, Enum):
    """详情视图中的标签页"""

    INFO = "info"
    TOKENS = "tokens"
    LOGS = "logs"
    SETTINGS = "settings"


class TabStatus(str, Enum):
    LOADED = "loaded"  # 本次调用完成了加载
    CACHED = "cached"  # 已加载或正在加载，没有发起新请求
    FAILED = "failed"  # 加载失败，未加入集合
    SKIPPED = "skipped"  # 会话已失效，结果被丢弃
    BLOCKED = "blocked"  # 会话尚未就绪


@dataclass
class TabLoadResult:
    view_id: ViewId
    status: TabStatus
    data: Any = None
    error: Optional[Exception] = None


def parse_view_id(view_id: Union[ViewId, str]) -> ViewId:
    try:
        return ViewId(view_id)
    except ValueError:
        raise InvalidParameterException(f"Unknown view: {view_id}", parameter="view_id") from None


class TabDataLoader:
    """
    标签页加载器

    fetch_fn 为 None 的视图（info、settings）不需要请求，直接视为加载完成。
    加载失败时视图不会加入集合，下次选择时会重新请求。
    同一视图的加载尚未完成时再次选择，会等待同一个请求而不是重新发起。
    """

    def __init__(self):
        self._in_flight: dict[ViewId, asyncio.Task] = {}

    def is_loading(self, view_id: ViewId) -> bool:
        return view_id in self._in_flight

    async def ensure_loaded(
        self,
        view_id: Union[ViewId, str],
        loaded: set[ViewId],
        fetch_fn: Optional[Callable[[], Awaitable[Any]]],
        is_current: Optional[Callable[[], bool]] = None,
    ) -> TabLoadResult:
        """
        确保视图已加载

        Args:
            view_id: 视图标识
            loaded: 会话持有的已加载集合，成功时原地加入
            fetch_fn: 视图的加载函数
            is_current: 请求返回后检查会话是否仍然有效，无效时丢弃结果

        Returns:
            TabLoadResult，失败时错误放在 error 字段中而不是抛出
        """
        view = parse_view_id(view_id)

        if view in loaded:
            return TabLoadResult(view, TabStatus.CACHED)

        if fetch_fn is None:
            loaded.add(view)
            return TabLoadResult(view, TabStatus.LOADED)

        task = self._in_flight.get(view)
        if task is not None:
            try:
                data = await task
            except Exception as e:
                return TabLoadResult(view, TabStatus.FAILED, error=e)
            return TabLoadResult(view, TabStatus.CACHED, data=data)

        task = asyncio.ensure_future(fetch_fn())
        self._in_flight[view] = task
        try:
            data = await task
        except Exception as e:
            if is_current is not None and not is_current():
                return TabLoadResult(view, TabStatus.SKIPPED, error=e)
            logger.warning(f"标签页加载失败 {view.value}: {e}", fetch=view.value)
            return TabLoadResult(view, TabStatus.FAILED, error=e)
        finally:
            self._in_flight.pop(view, None)

        if is_current is not None and not is_current():
            return TabLoadResult(view, TabStatus.SKIPPED, data=data)

        loaded.add(view)
        return TabLoadResult(view, TabStatus.LOADED, data=data)
