"""
Database models
数据库模型
"""

from .base import Base
from .relay_station import RelayStationRecord

__all__ = ["Base", "RelayStationRecord"]
