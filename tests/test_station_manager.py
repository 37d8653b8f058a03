"""中转站存储测试"""

import pytest

from relay_core.config_models import Database as DatabaseSettings
from relay_core.database import Database
from relay_core.exceptions import StationNotFoundException
from relay_core.manager import RelayStationManager
from relay_core.models import RelayStationRecord
from relay_core.station_models import (
    AuthMethod,
    CreateRelayStationRequest,
    RelayStationAdapter,
    UpdateRelayStationRequest,
)


@pytest.fixture
async def manager():
    database = Database(DatabaseSettings(url="sqlite+aiosqlite:///:memory:"))
    await database.init_db()
    yield RelayStationManager(database)
    await database.close()


def request(name="Relay", **overrides):
    data = {
        "name": name,
        "api_url": "https://relay.example.com/",
        "system_token": "sk-test",
        "user_id": "12",
        "adapter_config": {"group": "default"},
    }
    data.update(overrides)
    return CreateRelayStationRequest(**data)


class TestRequestValidation:
    """创建请求校验"""

    def test_trailing_slash_removed(self):
        assert request().api_url == "https://relay.example.com"

    def test_blank_fields_rejected(self):
        with pytest.raises(ValueError):
            request(name="   ")
        with pytest.raises(ValueError):
            request(system_token="")

    def test_blank_user_id_becomes_none(self):
        assert request(user_id=" ").user_id is None

    def test_update_blank_fields_rejected(self):
        with pytest.raises(ValueError):
            UpdateRelayStationRequest(name="  ")
        with pytest.raises(ValueError):
            UpdateRelayStationRequest(api_url="")
        with pytest.raises(ValueError):
            UpdateRelayStationRequest(system_token="")

    def test_update_null_for_required_column_rejected(self):
        with pytest.raises(ValueError):
            UpdateRelayStationRequest(name=None)
        with pytest.raises(ValueError):
            UpdateRelayStationRequest(enabled=None)

    def test_update_normalizes_values(self):
        updates = UpdateRelayStationRequest(
            api_url=" https://new.example.com/ ", user_id="  ", description=None
        )

        assert updates.api_url == "https://new.example.com"
        assert updates.user_id is None
        assert updates.description is None


class TestRelayStationManager:
    """中转站存储测试"""

    @pytest.mark.asyncio
    async def test_add_and_get(self, manager):
        station = await manager.add_station(request())

        assert station.id
        assert station.created_at > 0
        assert station.adapter == RelayStationAdapter.NEWAPI
        assert station.auth_method == AuthMethod.BEARER_TOKEN

        loaded = await manager.get_station(station.id)
        assert loaded == station
        assert loaded.adapter_config == {"group": "default"}

    @pytest.mark.asyncio
    async def test_get_missing(self, manager):
        assert await manager.get_station("nope") is None

    @pytest.mark.asyncio
    async def test_list_newest_first(self, manager):
        first = await manager.add_station(request("first"))
        second = await manager.add_station(request("second"))
        # 同一秒内创建时按时间戳无法区分，手动拉开
        async with manager.database.session() as session:
            record = await session.get(RelayStationRecord, first.id)
            record.created_at = second.created_at - 100

        stations = await manager.list_stations()

        assert [s.name for s in stations] == ["second", "first"]

    @pytest.mark.asyncio
    async def test_partial_update(self, manager):
        station = await manager.add_station(request())

        updated = await manager.update_station(
            station.id, UpdateRelayStationRequest(name="Renamed", api_url="https://new.example.com/")
        )

        assert updated.name == "Renamed"
        assert updated.api_url == "https://new.example.com"
        assert updated.system_token == "sk-test"
        assert updated.user_id == "12"

    @pytest.mark.asyncio
    async def test_update_missing(self, manager):
        with pytest.raises(StationNotFoundException):
            await manager.update_station("nope", UpdateRelayStationRequest(name="x"))

    @pytest.mark.asyncio
    async def test_delete(self, manager):
        station = await manager.add_station(request())

        await manager.delete_station(station.id)

        assert await manager.get_station(station.id) is None
        with pytest.raises(StationNotFoundException):
            await manager.delete_station(station.id)

    @pytest.mark.asyncio
    async def test_update_clears_nullable_columns(self, manager):
        station = await manager.add_station(request(description="main relay"))

        updated = await manager.update_station(
            station.id, UpdateRelayStationRequest(description=None, user_id="")
        )

        assert updated.description is None
        assert updated.user_id is None
        assert updated.name == "Relay"

    @pytest.mark.asyncio
    async def test_update_skips_null_required_columns(self, manager):
        station = await manager.add_station(request())
        # 绕过校验构造的请求也不会把必填列写成 NULL
        updates = UpdateRelayStationRequest.model_construct(
            _fields_set={"name", "api_url"}, name=None, api_url=None
        )

        updated = await manager.update_station(station.id, updates)

        assert updated.name == "Relay"
        assert updated.api_url == "https://relay.example.com"
