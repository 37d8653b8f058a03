"""中转站列表控制器测试"""

import pytest

from conftest import FakeBackend, make_station
from relay_core.session import (
    DeleteOutcome,
    SessionState,
    StationListController,
    ViewState,
)
from relay_core.station_models import CreateRelayStationRequest


def create_request(name="New Station"):
    return CreateRelayStationRequest(
        name=name,
        api_url="https://new.example.com/",
        system_token="sk-new",
        user_id="7",
    )


class TestRefresh:
    """列表刷新测试"""

    @pytest.mark.asyncio
    async def test_replaces_collection(self, backend):
        controller = StationListController(backend)
        controller.stations = [make_station("old")]

        stations = await controller.refresh()

        assert [s.id for s in stations] == ["s1"]
        assert [s.id for s in controller.stations] == ["s1"]
        assert controller.loading is False

    @pytest.mark.asyncio
    async def test_failure_keeps_list(self, backend):
        controller = StationListController(backend)
        await controller.refresh()
        backend.failures["list_relay_stations"] = RuntimeError("offline")

        await controller.refresh()

        assert [s.id for s in controller.stations] == ["s1"]
        assert controller.last_error == "offline"


class TestCreate:
    """创建测试"""

    @pytest.mark.asyncio
    async def test_success_refreshes_and_signals(self, backend):
        created = []
        controller = StationListController(backend, on_created=created.append)
        controller.open_create_form()

        station = await controller.create(create_request())

        assert station is not None
        assert station.name == "New Station"
        assert created == [station]
        assert controller.show_create_form is False
        assert backend.calls["list_relay_stations"] == 1
        assert [s.id for s in controller.stations] == ["s1", "s2"]

    @pytest.mark.asyncio
    async def test_failure_keeps_form_open(self, backend):
        backend.failures["add_relay_station"] = RuntimeError("duplicate name")
        controller = StationListController(backend)
        controller.open_create_form()

        assert await controller.create(create_request()) is None

        assert controller.show_create_form is True
        assert controller.create_error == "duplicate name"
        assert backend.calls["add_relay_station"] == 1
        assert backend.calls["list_relay_stations"] == 0


class TestSelect:
    """详情切换测试"""

    def test_select_creates_fresh_session(self, backend, station):
        controller = StationListController(backend)

        first = controller.select(station)
        second = controller.select(make_station("s2"))

        assert controller.view_state == ViewState.DETAILS
        assert first is not second
        assert first.closed is True
        assert second.station.id == "s2"
        assert controller.selected_station.id == "s2"

    def test_back_to_list(self, backend, station):
        controller = StationListController(backend)
        session = controller.select(station)

        controller.back_to_list()

        assert controller.view_state == ViewState.LIST
        assert controller.session is None
        assert controller.selected_station is None
        assert session.closed is True

    @pytest.mark.asyncio
    async def test_session_options_passed_through(self, backend, station):
        opened = []
        controller = StationListController(
            backend, page_size=20, opener=lambda url: opened.append(url) or True
        )
        session = controller.select(station)
        await session.initialize()

        await session.load_logs_page(1)
        session.open_external()

        assert backend.log_requests[-1] == ("s1", 1, 20)
        assert opened == [station.api_url]


class TestDeleteFlow:
    """删除后回到列表"""

    @pytest.mark.asyncio
    async def test_delete_returns_to_list_and_refreshes(self):
        stations = [make_station("s1"), make_station("s2")]
        backend = FakeBackend(stations)
        controller = StationListController(backend)
        await controller.refresh()
        session = controller.select(stations[0])
        assert await session.initialize() == SessionState.READY

        outcome = await session.delete(lambda station: True)

        assert outcome == DeleteOutcome.DELETED
        assert controller.view_state == ViewState.LIST
        assert controller.session is None
        assert session.closed is True
        assert [s.id for s in controller.stations] == ["s2"]

    @pytest.mark.asyncio
    async def test_failed_delete_stays_in_details(self, backend, station):
        controller = StationListController(backend)
        await controller.refresh()
        session = controller.select(station)
        await session.initialize()
        backend.failures["delete_relay_station"] = RuntimeError("forbidden")

        outcome = await session.delete(lambda s: True)

        assert outcome == DeleteOutcome.FAILED
        assert controller.view_state == ViewState.DETAILS
        assert controller.session is session
        assert [s.id for s in controller.stations] == ["s1"]
        assert backend.calls["list_relay_stations"] == 1
