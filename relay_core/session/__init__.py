"""
中转站会话层
列表控制器、详情会话控制器及其依赖的加载组件
"""

from .backend import StationBackend
from .fallback import attempt_with_fallback, copy_text, open_external
from .list_controller import StationListController, ViewState
from .paginator import DEFAULT_PAGE_SIZE, LogPaginator, PageNavigation
from .probe import ConnectionProbe
from .quota import to_currency_amount, to_display_price
from .session_controller import DeleteOutcome, SessionState, StationSessionController
from .tab_loader import TabDataLoader, TabLoadResult, TabStatus, ViewId

__all__ = [
    "StationBackend",
    "attempt_with_fallback",
    "copy_text",
    "open_external",
    "StationListController",
    "ViewState",
    "DEFAULT_PAGE_SIZE",
    "LogPaginator",
    "PageNavigation",
    "ConnectionProbe",
    "to_currency_amount",
    "to_display_price",
    "DeleteOutcome",
    "SessionState",
    "StationSessionController",
    "TabDataLoader",
    "TabLoadResult",
    "TabStatus",
    "ViewId",
]
