"""中转站适配器"""

from .base import StationAdapter
from .newapi import NewApiAdapter
from .registry import AdapterRegistry, create_adapter

__all__ = ["StationAdapter", "NewApiAdapter", "AdapterRegistry", "create_adapter"]
