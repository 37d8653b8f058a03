"""
日志分页
"""

import math
from dataclasses import dataclass

from relay_core.exceptions import InvalidParameterException
from relay_core.station_models import LogPage

from .backend import StationBackend

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PageNavigation:
    """分页控件的计算结果，页码从1开始"""

    page: int
    page_size: int
    total: int

    @classmethod
    def from_page(cls, log_page: LogPage) -> "PageNavigation":
        return cls(page=log_page.page, page_size=log_page.page_size, total=log_page.total)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def needs_pagination(self) -> bool:
        return self.total > self.page_size

    @property
    def item_range(self) -> tuple[int, int]:
        """当前页显示的条目序号范围（闭区间），没有条目时为 (0, 0)"""
        start = (self.page - 1) * self.page_size + 1
        end = min(self.page * self.page_size, self.total)
        if start > end:
            return (0, 0)
        return (start, end)


class LogPaginator:
    """按页获取日志，不做跨页缓存"""

    def __init__(self, backend: StationBackend):
        self.backend = backend

    async def fetch_page(
        self, station_id: str, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> LogPage:
        if page < 1:
            raise InvalidParameterException(f"page must be >= 1, got {page}", parameter="page")
        if page_size <= 0:
            raise InvalidParameterException(
                f"page_size must be > 0, got {page_size}", parameter="page_size"
            )
        return await self.backend.get_station_logs(station_id, page, page_size)
