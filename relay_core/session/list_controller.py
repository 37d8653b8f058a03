"""
中转站列表
管理中转站集合、创建表单和详情会话的切换
"""

from enum import Enum
from typing import Any, Callable, List, Optional

from relay_core.station_models import CreateRelayStationRequest, RelayStation
from relay_core.utils.logger import get_logger

from .backend import StationBackend
from .paginator import DEFAULT_PAGE_SIZE
from .session_controller import StationSessionController

logger = get_logger(__name__)


class ViewState(str, Enum):
    LIST = "list"
    DETAILS = "details"


class StationListController:
    """中转站列表控制器"""

    def __init__(
        self,
        backend: StationBackend,
        page_size: int = DEFAULT_PAGE_SIZE,
        on_created: Optional[Callable[[RelayStation], None]] = None,
        **session_options: Any,
    ):
        """
        Args:
            backend: 中转站后端
            page_size: 详情会话的日志分页大小
            on_created: 创建成功后的回调
            session_options: 传给 StationSessionController 的其他参数（打开链接、剪贴板、提示回调）
        """
        self.backend = backend
        self.page_size = page_size
        self.on_created = on_created
        self.session_options = session_options

        self.stations: List[RelayStation] = []
        self.loading = False
        self.last_error: Optional[str] = None

        self.view_state = ViewState.LIST
        self.session: Optional[StationSessionController] = None

        # 创建表单
        self.show_create_form = False
        self.creating = False
        self.create_error: Optional[str] = None

        self._refresh_generation = 0

    @property
    def selected_station(self) -> Optional[RelayStation]:
        if self.view_state == ViewState.DETAILS and self.session is not None:
            return self.session.station
        return None

    async def refresh(self) -> List[RelayStation]:
        """重新获取全部中转站，整体替换当前列表"""
        self._refresh_generation += 1
        generation = self._refresh_generation
        self.loading = True

        try:
            stations = await self.backend.list_relay_stations()
        except Exception as e:
            if generation == self._refresh_generation:
                logger.error(f"获取中转站列表失败: {e}", fetch="station_list")
                self.last_error = str(e)
                self.loading = False
            return self.stations

        # 较早发起的刷新晚到时丢弃
        if generation == self._refresh_generation:
            self.stations = list(stations)
            self.last_error = None
            self.loading = False
        return self.stations

    def open_create_form(self) -> None:
        self.show_create_form = True
        self.create_error = None

    def close_create_form(self) -> None:
        self.show_create_form = False
        self.create_error = None

    async def create(self, request: CreateRelayStationRequest) -> Optional[RelayStation]:
        """
        创建中转站

        成功后关闭表单并刷新列表；失败时保留表单并记录错误，不自动重试
        """
        self.creating = True
        self.create_error = None
        try:
            station = await self.backend.add_relay_station(request)
        except Exception as e:
            logger.error(f"创建中转站失败: {e}", action="create", station_name=request.name)
            self.create_error = str(e)
            self.show_create_form = True
            self.creating = False
            return None

        self.creating = False
        self.show_create_form = False
        logger.info(f"创建中转站成功: {station.name}", station_id=station.id, action="create")

        await self.refresh()
        if self.on_created is not None:
            try:
                self.on_created(station)
            except Exception as e:
                logger.warning(f"创建回调失败: {e}", station_id=station.id)
        return station

    def select(self, station: RelayStation) -> StationSessionController:
        """进入详情视图，为选中的中转站创建新的会话"""
        if self.session is not None:
            self.session.close()

        self.session = StationSessionController(
            station,
            self.backend,
            page_size=self.page_size,
            on_deleted=self._handle_deleted,
            **self.session_options,
        )
        self.view_state = ViewState.DETAILS
        logger.debug(f"打开中转站详情: {station.name}", station_id=station.id)
        return self.session

    def back_to_list(self) -> None:
        """关闭当前会话并回到列表"""
        if self.session is not None:
            self.session.close()
            self.session = None
        self.view_state = ViewState.LIST

    async def _handle_deleted(self, station: RelayStation) -> None:
        if self.session is not None and self.session.station.id == station.id:
            self.back_to_list()
        await self.refresh()
