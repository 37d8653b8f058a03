"""
会话控制器依赖的后端接口
RelayStationService 是默认实现，测试中可以替换为内存实现
"""

from typing import List, Protocol

from relay_core.station_models import (
    ConnectionTestResult,
    CreateRelayStationRequest,
    LogPage,
    RelayStation,
    RelayStationToken,
    StationInfo,
    UserInfo,
)


class StationBackend(Protocol):
    """中转站后端操作，传输错误和后端错误都以异常形式抛出"""

    async def list_relay_stations(self) -> List[RelayStation]: ...

    async def add_relay_station(self, request: CreateRelayStationRequest) -> RelayStation: ...

    async def delete_relay_station(self, station_id: str) -> None: ...

    async def get_station_info(self, station_id: str) -> StationInfo: ...

    async def get_token_user_info(self, station_id: str, user_id: str) -> UserInfo: ...

    async def test_station_connection(self, station_id: str) -> ConnectionTestResult: ...

    async def list_station_tokens(self, station_id: str) -> List[RelayStationToken]: ...

    async def get_station_logs(self, station_id: str, page: int, page_size: int) -> LogPage: ...
