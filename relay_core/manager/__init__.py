"""
中转站管理模块
"""

from .station_manager import RelayStationManager

__all__ = ["RelayStationManager"]
