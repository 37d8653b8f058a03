"""
中转站详情会话
管理单个中转站详情视图的完整生命周期：初始加载、标签页切换、日志翻页和删除
"""

import asyncio
import inspect
import json
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Union

from relay_core.exceptions import InvalidParameterException
from relay_core.station_models import (
    ConnectionTestResult,
    LogPage,
    RelayStation,
    RelayStationToken,
    StationInfo,
    StationLogEntry,
    UserInfo,
)
from relay_core.utils.logger import get_logger

from . import fallback
from .backend import StationBackend
from .paginator import DEFAULT_PAGE_SIZE, LogPaginator, PageNavigation
from .probe import ConnectionProbe
from .quota import to_currency_amount, to_display_price
from .tab_loader import TabDataLoader, TabLoadResult, TabStatus, ViewId, parse_view_id

logger = get_logger(__name__)

ChangeCallback = Callable[["StationSessionController"], None]
ConfirmCallback = Callable[[RelayStation], Union[bool, Awaitable[bool]]]
DeletedCallback = Callable[[RelayStation], Union[None, Awaitable[None]]]
AlertCallback = Callable[[str], None]
TextSink = Callable[[str], bool]


class SessionState(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    ERROR = "error"


class DeleteOutcome(str, Enum):
    CANCELLED = "cancelled"
    DELETED = "deleted"
    FAILED = "failed"


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class StationSessionController:
    """
    单个中转站的详情会话

    每个中转站ID对应一个新的实例，切换站点时替换实例而不是修改字段。
    所有远端请求在返回后都会检查会话是否仍然有效（未关闭且代次未变），
    过期的结果直接丢弃。
    """

    def __init__(
        self,
        station: RelayStation,
        backend: StationBackend,
        page_size: int = DEFAULT_PAGE_SIZE,
        on_deleted: Optional[DeletedCallback] = None,
        on_alert: Optional[AlertCallback] = None,
        opener: Optional[TextSink] = None,
        fallback_opener: Optional[TextSink] = None,
        clipboard: Optional[TextSink] = None,
        fallback_clipboard: Optional[TextSink] = None,
    ):
        self.station = station
        self.backend = backend
        self.page_size = page_size
        self.on_deleted = on_deleted
        self.on_alert = on_alert

        self._opener = opener
        self._fallback_opener = fallback_opener
        self._clipboard = clipboard
        self._fallback_clipboard = fallback_clipboard

        self.probe = ConnectionProbe(backend)
        self.paginator = LogPaginator(backend)
        self.tab_loader = TabDataLoader()

        # 会话状态
        self.state = SessionState.INITIALIZING
        self.error_message: Optional[str] = None
        self.station_info: Optional[StationInfo] = None
        self.user_info: Optional[UserInfo] = None
        self.connection_result: Optional[ConnectionTestResult] = None
        self.tokens: List[RelayStationToken] = []
        self.log_page: Optional[LogPage] = None

        # 标签页状态
        self.active_tab = ViewId.INFO
        self.loaded_tabs: set[ViewId] = set()
        self.tab_errors: dict[ViewId, str] = {}

        # 加载标志，观察者据此容忍部分填充的状态
        self.initial_loading = False
        self.tab_loading = False
        self.logs_loading = False
        self.deleting = False

        self.last_alert: Optional[str] = None
        self.closed = False

        self._generation = 0
        self._logs_generation = 0
        self._listeners: List[ChangeCallback] = []

    # 观察者

    def add_listener(self, callback: ChangeCallback) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: ChangeCallback) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as e:
                logger.warning(f"会话状态回调失败: {e}", station_id=self.station.id)

    def _is_current(self, generation: int) -> bool:
        return not self.closed and generation == self._generation

    def _alert(self, message: str) -> None:
        self.last_alert = message
        if self.on_alert is None:
            return
        try:
            self.on_alert(message)
        except Exception as e:
            logger.warning(f"提示回调失败: {e}", station_id=self.station.id)

    # 派生字段

    @property
    def quota_per_unit(self) -> Optional[int]:
        return self.station_info.quota_per_unit if self.station_info else None

    def display_price(self, quota: Optional[int]) -> str:
        """按当前站点的换算系数显示价格"""
        return to_display_price(quota, self.quota_per_unit)

    @property
    def log_navigation(self) -> Optional[PageNavigation]:
        if self.log_page is None:
            return None
        return PageNavigation.from_page(self.log_page)

    # 初始加载

    async def _load_user_info(self) -> Optional[UserInfo]:
        try:
            return await self.backend.get_token_user_info(self.station.id, self.station.user_id)
        except Exception as e:
            logger.warning(
                f"获取用户信息失败: {e}",
                station_id=self.station.id,
                fetch="user_info",
            )
            return None

    async def _no_user_info(self) -> Optional[UserInfo]:
        return None

    def _rescale_user_info(self, user_info: UserInfo) -> UserInfo:
        """用站点自己的换算系数重新计算金额"""
        updates: dict[str, Any] = {}
        if user_info.quota is not None:
            updates["balance_remaining"] = to_currency_amount(user_info.quota, self.quota_per_unit)
        if user_info.used_quota is not None:
            updates["amount_used"] = to_currency_amount(user_info.used_quota, self.quota_per_unit)
        return user_info.model_copy(update=updates) if updates else user_info

    async def initialize(self) -> SessionState:
        """
        初始加载：站点信息（必需），然后并发获取用户信息和连接测试

        站点信息失败时会话进入 error 状态，再次调用 initialize 即可重试。
        用户信息和连接测试失败不影响会话进入 ready。
        """
        if self.closed:
            return self.state

        self._generation += 1
        generation = self._generation
        station_id = self.station.id

        self.state = SessionState.INITIALIZING
        self.error_message = None
        self.initial_loading = True
        self._notify()

        try:
            station_info = await self.backend.get_station_info(station_id)
        except Exception as e:
            if not self._is_current(generation):
                return self.state
            logger.error(f"获取站点信息失败: {e}", station_id=station_id, fetch="station_info")
            self.state = SessionState.ERROR
            self.error_message = f"Failed to load station data: {e}"
            self.initial_loading = False
            self._notify()
            return self.state

        if not self._is_current(generation):
            return self.state
        self.station_info = station_info
        self._notify()

        user_fetch = self._load_user_info() if self.station.user_id else self._no_user_info()
        user_info, connection_result = await asyncio.gather(
            user_fetch, self.probe.test(station_id)
        )

        if not self._is_current(generation):
            return self.state

        self.user_info = self._rescale_user_info(user_info) if user_info else None
        self.connection_result = connection_result
        self.loaded_tabs.add(ViewId.INFO)
        self.state = SessionState.READY
        self.initial_loading = False
        logger.info(
            f"中转站会话就绪: {self.station.name}",
            station_id=station_id,
            connection_ok=connection_result.success,
            has_user_info=self.user_info is not None,
        )
        self._notify()

        # 初始化期间选择的标签页在就绪后加载
        if self.active_tab not in self.loaded_tabs:
            await self.select_tab(self.active_tab)
        return self.state

    # 标签页

    async def _fetch_tokens(self) -> List[RelayStationToken]:
        return await self.backend.list_station_tokens(self.station.id)

    async def _fetch_first_log_page(self) -> tuple[int, LogPage]:
        self._logs_generation += 1
        logs_generation = self._logs_generation
        page = await self.paginator.fetch_page(self.station.id, 1, self.page_size)
        return logs_generation, page

    def _tab_fetcher(self, view: ViewId) -> Optional[Callable[[], Awaitable[Any]]]:
        if view == ViewId.TOKENS:
            return self._fetch_tokens
        if view == ViewId.LOGS:
            return self._fetch_first_log_page
        # info 由初始加载填充，settings 只有本地配置
        return None

    async def select_tab(self, view_id: Union[ViewId, str]) -> TabLoadResult:
        """切换标签页，每个标签页在会话内最多成功加载一次"""
        view = parse_view_id(view_id)
        self.active_tab = view

        if self.closed:
            return TabLoadResult(view, TabStatus.SKIPPED)
        if self.state != SessionState.READY:
            self._notify()
            return TabLoadResult(view, TabStatus.BLOCKED)

        generation = self._generation
        fetch_fn = self._tab_fetcher(view)
        if fetch_fn is not None and view not in self.loaded_tabs:
            self.tab_loading = True
        self._notify()

        result = await self.tab_loader.ensure_loaded(
            view,
            self.loaded_tabs,
            fetch_fn,
            is_current=lambda: self._is_current(generation),
        )
        if result.status == TabStatus.SKIPPED or not self._is_current(generation):
            return result

        self.tab_loading = any(self.tab_loader.is_loading(v) for v in ViewId)
        if result.status == TabStatus.LOADED:
            self.tab_errors.pop(view, None)
            if view == ViewId.TOKENS:
                self.tokens = result.data
            elif view == ViewId.LOGS:
                logs_generation, page = result.data
                # 翻页请求比首页更新时保留翻页结果
                if logs_generation == self._logs_generation:
                    self.log_page = page
        elif result.status == TabStatus.FAILED:
            self.tab_errors[view] = str(result.error)

        self._notify()
        return result

    # 日志翻页

    async def load_logs_page(self, page: int, page_size: Optional[int] = None) -> Optional[LogPage]:
        """
        获取指定页日志并替换当前页

        每次都会重新请求；失败时保留原有页面并记录错误
        """
        if self.closed:
            return None

        page_size = page_size or self.page_size
        generation = self._generation
        self._logs_generation += 1
        logs_generation = self._logs_generation

        self.logs_loading = True
        self._notify()

        def is_current() -> bool:
            return self._is_current(generation) and logs_generation == self._logs_generation

        try:
            log_page = await self.paginator.fetch_page(self.station.id, page, page_size)
        except InvalidParameterException:
            self.logs_loading = False
            self._notify()
            raise
        except Exception as e:
            if is_current():
                logger.warning(
                    f"获取日志失败: {e}", station_id=self.station.id, fetch="logs", page=page
                )
                self.tab_errors[ViewId.LOGS] = str(e)
                self.logs_loading = False
                self._notify()
            return None

        if not is_current():
            return None

        self.log_page = log_page
        self.tab_errors.pop(ViewId.LOGS, None)
        self.logs_loading = False
        self._notify()
        return log_page

    # 本地操作

    def open_external(self) -> bool:
        """在外部浏览器打开站点地址，失败只记录日志"""
        return fallback.open_external(self.station.api_url, self._opener, self._fallback_opener)

    def copy_log_metadata(self, entry: StationLogEntry, part: str = "raw") -> bool:
        """复制日志的原始数据（raw）或附加信息（other）"""
        if part not in ("raw", "other"):
            raise InvalidParameterException(f"Unknown metadata part: {part}", parameter="part")

        payload = (entry.metadata or {}).get(part)
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        return fallback.copy_text(text, self._clipboard, self._fallback_clipboard)

    def copy_token(self, token: RelayStationToken) -> bool:
        return fallback.copy_text(token.token, self._clipboard, self._fallback_clipboard)

    # 删除

    async def delete(self, confirm: ConfirmCallback) -> DeleteOutcome:
        """
        删除中转站

        必须由 confirm 回调明确确认后才会调用删除接口。
        成功后触发 on_deleted，失败时通过 on_alert 提示且会话保持不变。
        """
        if self.deleting:
            return DeleteOutcome.CANCELLED

        confirmed = await _maybe_await(confirm(self.station))
        if not confirmed:
            logger.debug("用户取消删除", station_id=self.station.id, action="delete")
            return DeleteOutcome.CANCELLED

        self.deleting = True
        self._notify()
        try:
            await self.backend.delete_relay_station(self.station.id)
        except Exception as e:
            logger.error(f"删除中转站失败: {e}", station_id=self.station.id, action="delete")
            self.deleting = False
            self._alert(f"Failed to delete station: {e}")
            self._notify()
            return DeleteOutcome.FAILED

        self.deleting = False
        logger.info(f"已删除中转站: {self.station.name}", station_id=self.station.id, action="delete")
        if self.on_deleted is not None:
            await _maybe_await(self.on_deleted(self.station))
        return DeleteOutcome.DELETED

    def close(self) -> None:
        """结束会话，之后到达的响应都会被丢弃"""
        if self.closed:
            return
        self.closed = True
        self._generation += 1
        self._listeners.clear()
