"""测试公共夹具"""

import sys
from collections import Counter
from pathlib import Path
from typing import Any, Optional

import pytest

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from relay_core.station_models import (  # noqa: E402
    AuthMethod,
    ConnectionTestResult,
    CreateRelayStationRequest,
    LogPage,
    RelayStation,
    RelayStationAdapter,
    RelayStationToken,
    StationInfo,
    StationLogEntry,
    UserInfo,
)


def make_station(station_id: str = "s1", user_id: Optional[str] = "u1", **overrides: Any) -> RelayStation:
    data = {
        "id": station_id,
        "name": f"Station {station_id}",
        "api_url": f"https://{station_id}.example.com",
        "adapter": RelayStationAdapter.NEWAPI,
        "auth_method": AuthMethod.BEARER_TOKEN,
        "system_token": "sk-system-token",
        "user_id": user_id,
        "created_at": 1700000000,
        "updated_at": 1700000000,
    }
    data.update(overrides)
    return RelayStation(**data)


def make_log_page(page: int, page_size: int = 10, total: int = 25) -> LogPage:
    start = (page - 1) * page_size
    count = max(0, min(page_size, total - start))
    items = [
        StationLogEntry(
            id=str(start + i + 1),
            timestamp=1700000000 - (start + i),
            model_name="gpt-4o",
            quota=1000 * (start + i + 1),
            metadata={"raw": {"id": start + i + 1}, "other": {"frt": 120}},
        )
        for i in range(count)
    ]
    return LogPage(items=items, page=page, page_size=page_size, total=total)


class FakeBackend:
    """内存后端，记录每个操作的调用次数，可按操作注入异常"""

    def __init__(self, stations: Optional[list[RelayStation]] = None):
        self.stations: list[RelayStation] = list(stations or [])
        self.calls: Counter = Counter()
        self.failures: dict[str, Exception] = {}
        self.log_requests: list[tuple[str, int, int]] = []

        self.station_info = StationInfo(name="Remote", api_url="https://s1.example.com", quota_per_unit=500000)
        self.user_info = UserInfo(user_id="u1", username="alice", quota=1000000, used_quota=250000)
        self.connection = ConnectionTestResult(success=True, message="Connection successful", response_time=42)
        self.tokens = [
            RelayStationToken(id="1", station_id="s1", name="default", token="sk-abcdefghijklmnop", enabled=True)
        ]
        self.log_total = 25

    def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        if operation in self.failures:
            raise self.failures[operation]

    async def list_relay_stations(self) -> list[RelayStation]:
        self._enter("list_relay_stations")
        return list(self.stations)

    async def add_relay_station(self, request: CreateRelayStationRequest) -> RelayStation:
        self._enter("add_relay_station")
        station = make_station(f"s{len(self.stations) + 1}", user_id=request.user_id, name=request.name)
        self.stations.append(station)
        return station

    async def delete_relay_station(self, station_id: str) -> None:
        self._enter("delete_relay_station")
        self.stations = [s for s in self.stations if s.id != station_id]

    async def get_station_info(self, station_id: str) -> StationInfo:
        self._enter("get_station_info")
        return self.station_info

    async def get_token_user_info(self, station_id: str, user_id: str) -> UserInfo:
        self._enter("get_token_user_info")
        return self.user_info

    async def test_station_connection(self, station_id: str) -> ConnectionTestResult:
        self._enter("test_station_connection")
        return self.connection

    async def list_station_tokens(self, station_id: str) -> list[RelayStationToken]:
        self._enter("list_station_tokens")
        return list(self.tokens)

    async def get_station_logs(self, station_id: str, page: int, page_size: int) -> LogPage:
        self._enter("get_station_logs")
        self.log_requests.append((station_id, page, page_size))
        return make_log_page(page, page_size, self.log_total)


@pytest.fixture
def station() -> RelayStation:
    return make_station()


@pytest.fixture
def backend(station: RelayStation) -> FakeBackend:
    return FakeBackend([station])
