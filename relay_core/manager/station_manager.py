"""
Relay station management system
中转站配置存储
"""

import time
import uuid
from typing import Any, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from relay_core.database import Database
from relay_core.exceptions import DatabaseException, ErrorCode, StationNotFoundException
from relay_core.models.relay_station import RelayStationRecord
from relay_core.station_models import (
    AuthMethod,
    CreateRelayStationRequest,
    RelayStation,
    RelayStationAdapter,
    UpdateRelayStationRequest,
)
from relay_core.utils.logger import get_logger

logger = get_logger(__name__)

# 允许通过部分更新修改的列
UPDATABLE_FIELDS = ("name", "description", "api_url", "system_token", "user_id", "enabled")
# 部分更新中可以被清空为 NULL 的列
NULLABLE_FIELDS = ("description", "user_id")


def _to_station(record: RelayStationRecord) -> RelayStation:
    """ORM记录转换为只读快照，未知的枚举值回退为默认值"""
    try:
        adapter = RelayStationAdapter(record.adapter)
    except ValueError:
        adapter = RelayStationAdapter.NEWAPI
    try:
        auth_method = AuthMethod(record.auth_method)
    except ValueError:
        auth_method = AuthMethod.BEARER_TOKEN

    return RelayStation(
        id=record.id,
        name=record.name,
        description=record.description,
        api_url=record.api_url,
        adapter=adapter,
        auth_method=auth_method,
        system_token=record.system_token,
        user_id=record.user_id,
        adapter_config=record.adapter_config,
        enabled=bool(record.enabled),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class RelayStationManager:
    """中转站管理器"""

    def __init__(self, database: Database):
        self.database = database

    async def list_stations(self) -> List[RelayStation]:
        """获取全部中转站，按创建时间倒序"""
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    select(RelayStationRecord).order_by(
                        RelayStationRecord.created_at.desc(), RelayStationRecord.name
                    )
                )
                return [_to_station(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            raise DatabaseException(
                ErrorCode.DATABASE_QUERY_FAILED, f"Failed to list stations: {e}", cause=e
            ) from e

    async def get_station(self, station_id: str) -> Optional[RelayStation]:
        """根据ID获取中转站"""
        try:
            async with self.database.session() as session:
                record = await session.get(RelayStationRecord, station_id)
                return _to_station(record) if record else None
        except SQLAlchemyError as e:
            raise DatabaseException(
                ErrorCode.DATABASE_QUERY_FAILED, f"Failed to get station: {e}", cause=e
            ) from e

    async def add_station(self, request: CreateRelayStationRequest) -> RelayStation:
        """新增中转站，生成ID和时间戳"""
        now = int(time.time())
        record = RelayStationRecord(
            id=str(uuid.uuid4()),
            name=request.name,
            description=request.description,
            api_url=request.api_url,
            adapter=request.adapter.value,
            auth_method=request.auth_method.value,
            system_token=request.system_token,
            user_id=request.user_id,
            adapter_config=request.adapter_config,
            enabled=request.enabled,
            created_at=now,
            updated_at=now,
        )

        try:
            async with self.database.session() as session:
                session.add(record)
                await session.flush()
                station = _to_station(record)
        except SQLAlchemyError as e:
            raise DatabaseException(
                ErrorCode.DATABASE_CONSTRAINT_VIOLATION,
                f"Failed to add station: {e}",
                cause=e,
            ) from e

        logger.info(f"新增中转站: {station.name} ({station.id})")
        return station

    async def update_station(
        self, station_id: str, updates: UpdateRelayStationRequest
    ) -> RelayStation:
        """部分更新中转站，只写入显式设置的字段"""
        changes: dict[str, Any] = {
            key: value
            for key, value in updates.model_dump(exclude_unset=True).items()
            if key in UPDATABLE_FIELDS and (value is not None or key in NULLABLE_FIELDS)
        }

        try:
            async with self.database.session() as session:
                record = await session.get(RelayStationRecord, station_id)
                if record is None:
                    raise StationNotFoundException(station_id)

                if changes:
                    for key, value in changes.items():
                        setattr(record, key, value)
                    record.updated_at = int(time.time())
                    await session.flush()

                station = _to_station(record)
        except SQLAlchemyError as e:
            raise DatabaseException(
                ErrorCode.DATABASE_QUERY_FAILED, f"Failed to update station: {e}", cause=e
            ) from e

        if changes:
            logger.info(f"更新中转站 {station_id}: {sorted(changes)}")
        return station

    async def delete_station(self, station_id: str) -> None:
        """删除中转站"""
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    delete(RelayStationRecord).where(RelayStationRecord.id == station_id)
                )
                deleted = result.rowcount
        except SQLAlchemyError as e:
            raise DatabaseException(
                ErrorCode.DATABASE_QUERY_FAILED, f"Failed to delete station: {e}", cause=e
            ) from e

        if not deleted:
            raise StationNotFoundException(station_id)
        logger.info(f"删除中转站: {station_id}")
