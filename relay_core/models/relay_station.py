"""
Relay station data model
中转站数据模型
"""

from sqlalchemy import JSON, Boolean, Column, Index, Integer, String, Text

from .base import Base


class RelayStationRecord(Base):
    """中转站表 - 用户配置的第三方API网关账户"""

    __tablename__ = "relay_stations"

    id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    api_url = Column(String(300), nullable=False)
    adapter = Column(String(20), nullable=False)  # newapi, oneapi, custom
    auth_method = Column(String(20), nullable=False)  # bearer_token, api_key, custom
    system_token = Column(String(500), nullable=False)
    user_id = Column(String(64))  # NewAPI 站点的用户ID
    adapter_config = Column(JSON)
    enabled = Column(Boolean, nullable=False, default=True)

    created_at = Column(Integer, nullable=False)  # epoch seconds
    updated_at = Column(Integer, nullable=False)

    __table_args__ = (Index("idx_relay_stations_created_at", "created_at"),)

    def __repr__(self):
        return f"<RelayStationRecord(name='{self.name}', adapter='{self.adapter}')>"
