"""Service layer exports."""

from .relay_station_service import RelayStationService

__all__ = ["RelayStationService"]
