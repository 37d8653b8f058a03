"""
Relay station API endpoints
中转站管理API接口
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Response

from relay_core.exceptions import InvalidParameterException
from relay_core.services import RelayStationService
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


def create_relay_station_router(
    service: RelayStationService, log_page_size: int = 10
) -> APIRouter:
    """
    创建中转站相关的API路由

    Args:
        service: 中转站服务
        log_page_size: 日志接口未指定 page_size 时的分页大小
    """

    router = APIRouter(prefix="/v1/relay-stations", tags=["relay-stations"])

    @router.get("", response_model=List[RelayStation])
    async def list_relay_stations():
        return await service.list_relay_stations()

    @router.post("", response_model=RelayStation, status_code=201)
    async def add_relay_station(request: CreateRelayStationRequest):
        return await service.add_relay_station(request)

    @router.get("/{station_id}", response_model=RelayStation)
    async def get_relay_station(station_id: str):
        return await service.get_relay_station(station_id)

    @router.patch("/{station_id}", response_model=RelayStation)
    async def update_relay_station(station_id: str, updates: UpdateRelayStationRequest):
        return await service.update_relay_station(station_id, updates)

    @router.delete("/{station_id}", status_code=204)
    async def delete_relay_station(station_id: str):
        await service.delete_relay_station(station_id)
        return Response(status_code=204)

    @router.get("/{station_id}/info", response_model=StationInfo)
    async def get_station_info(station_id: str):
        return await service.get_station_info(station_id)

    @router.get("/{station_id}/user-info", response_model=UserInfo)
    async def get_token_user_info(
        station_id: str, user_id: str = Query("", description="为空时使用站点配置的用户ID")
    ):
        return await service.get_token_user_info(station_id, user_id)

    @router.post("/{station_id}/test", response_model=ConnectionTestResult)
    async def test_station_connection(station_id: str):
        return await service.test_station_connection(station_id)

    @router.get("/{station_id}/logs", response_model=LogPage)
    async def get_station_logs(
        station_id: str,
        page: int = Query(1, ge=1),
        page_size: Optional[int] = Query(None, gt=0, le=100),
    ):
        return await service.get_station_logs(station_id, page, page_size or log_page_size)

    @router.get("/{station_id}/tokens", response_model=List[RelayStationToken])
    async def list_station_tokens(
        station_id: str,
        page: int = Query(1, ge=1),
        size: int = Query(10, gt=0, le=100),
    ):
        return await service.list_station_tokens(station_id, page, size)

    @router.post("/{station_id}/tokens", response_model=RelayStationToken, status_code=201)
    async def create_station_token(station_id: str, token_data: CreateTokenRequest):
        return await service.create_station_token(station_id, token_data)

    @router.put("/{station_id}/tokens/{token_id}", response_model=RelayStationToken)
    async def update_station_token(station_id: str, token_id: str, token_data: UpdateTokenRequest):
        if str(token_data.id) != token_id:
            raise InvalidParameterException(
                f"Token id mismatch: {token_id} != {token_data.id}", parameter="id"
            )
        return await service.update_station_token(station_id, token_id, token_data)

    @router.delete("/{station_id}/tokens/{token_id}", status_code=204)
    async def delete_station_token(station_id: str, token_id: str):
        await service.delete_station_token(station_id, token_id)
        return Response(status_code=204)

    return router
