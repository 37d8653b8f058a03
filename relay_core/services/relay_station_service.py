"""
中转站服务
组合配置存储和站点适配器，对外提供统一的中转站操作接口
"""

from typing import List, Optional

from relay_core.adapters import AdapterRegistry, StationAdapter
from relay_core.exceptions import StationNotFoundException
from relay_core.manager import RelayStationManager
from relay_core.station_models import (
    ConnectionTestResult,
    CreateRelayStationRequest,
    CreateTokenRequest,
    LogPage,
    RelayStation,
    RelayStationToken,
    StationInfo,
    UpdateRelayStationRequest,
    UpdateTokenRequest,
    UserInfo,
)
from relay_core.utils.logger import get_logger

logger = get_logger(__name__)


class RelayStationService:
    """中转站服务"""

    def __init__(self, manager: RelayStationManager, registry: Optional[AdapterRegistry] = None):
        self.manager = manager
        self.registry = registry or AdapterRegistry()

    async def _load(self, station_id: str) -> tuple[RelayStation, StationAdapter]:
        station = await self.manager.get_station(station_id)
        if station is None:
            raise StationNotFoundException(station_id)
        return station, self.registry.get_adapter(station.adapter)

    # 配置管理

    async def list_relay_stations(self) -> List[RelayStation]:
        return await self.manager.list_stations()

    async def get_relay_station(self, station_id: str) -> RelayStation:
        station = await self.manager.get_station(station_id)
        if station is None:
            raise StationNotFoundException(station_id)
        return station

    async def add_relay_station(self, request: CreateRelayStationRequest) -> RelayStation:
        return await self.manager.add_station(request)

    async def update_relay_station(
        self, station_id: str, updates: UpdateRelayStationRequest
    ) -> RelayStation:
        return await self.manager.update_station(station_id, updates)

    async def delete_relay_station(self, station_id: str) -> None:
        await self.manager.delete_station(station_id)

    # 远端站点查询

    async def get_station_info(self, station_id: str) -> StationInfo:
        station, adapter = await self._load(station_id)
        return await adapter.get_station_info(station)

    async def get_token_user_info(self, station_id: str, user_id: str) -> UserInfo:
        station, adapter = await self._load(station_id)
        return await adapter.get_user_info(station, user_id)

    async def test_station_connection(self, station_id: str) -> ConnectionTestResult:
        station, adapter = await self._load(station_id)
        result = await adapter.test_connection(station)
        logger.info(
            f"中转站连接测试 {station_id}: success={result.success} "
            f"message={result.message} response_time={result.response_time}"
        )
        return result

    async def get_station_logs(
        self, station_id: str, page: int = 1, page_size: int = 10
    ) -> LogPage:
        station, adapter = await self._load(station_id)
        return await adapter.get_logs(station, page, page_size)

    # 令牌管理

    async def list_station_tokens(
        self, station_id: str, page: int = 1, size: int = 10
    ) -> List[RelayStationToken]:
        station, adapter = await self._load(station_id)
        return await adapter.list_tokens(station, page, size)

    async def create_station_token(
        self, station_id: str, token_data: CreateTokenRequest
    ) -> RelayStationToken:
        station, adapter = await self._load(station_id)
        return await adapter.create_token(station, token_data)

    async def update_station_token(
        self, station_id: str, token_id: str, token_data: UpdateTokenRequest
    ) -> RelayStationToken:
        station, adapter = await self._load(station_id)
        return await adapter.update_token(station, token_id, token_data)

    async def delete_station_token(self, station_id: str, token_id: str) -> None:
        station, adapter = await self._load(station_id)
        await adapter.delete_token(station, token_id)

    async def close(self) -> None:
        """关闭所有适配器的HTTP客户端"""
        await self.registry.cleanup()
