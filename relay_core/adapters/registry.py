"""
中转站适配器注册中心
按中转站类型创建并缓存适配器实例
"""

from typing import Optional

import httpx

from relay_core.config_models import Http as HttpSettings
from relay_core.station_models import RelayStationAdapter
from relay_core.utils.logger import get_logger

from .base import StationAdapter
from .newapi import NewApiAdapter

logger = get_logger(__name__)


class AdapterRegistry:
    """中转站适配器注册中心"""

    def __init__(
        self,
        settings: Optional[HttpSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or HttpSettings()
        self._transport = transport
        self._adapters: dict[RelayStationAdapter, type[StationAdapter]] = {}
        self._instances: dict[RelayStationAdapter, StationAdapter] = {}
        self._register_builtin_adapters()

    def _register_builtin_adapters(self):
        """注册内置适配器，OneAPI和自定义站点都兼容NewAPI接口"""
        self.register(RelayStationAdapter.NEWAPI, NewApiAdapter)
        self.register(RelayStationAdapter.ONEAPI, NewApiAdapter)
        self.register(RelayStationAdapter.CUSTOM, NewApiAdapter)

    def register(
        self, adapter_type: RelayStationAdapter, adapter_class: type[StationAdapter]
    ) -> None:
        """
        注册适配器类

        Args:
            adapter_type: 中转站类型
            adapter_class: 适配器类
        """
        if not issubclass(adapter_class, StationAdapter):
            raise ValueError(f"适配器类必须继承StationAdapter: {adapter_class}")

        self._adapters[adapter_type] = adapter_class
        # 已缓存的旧实例不再对应新类
        self._instances.pop(adapter_type, None)
        logger.debug(f"注册适配器: {adapter_type.value} -> {adapter_class.__name__}")

    def get_adapter(self, adapter_type: RelayStationAdapter) -> StationAdapter:
        """获取（必要时创建）指定类型的适配器实例"""
        instance = self._instances.get(adapter_type)
        if instance is not None:
            return instance

        adapter_class = self._adapters.get(adapter_type)
        if adapter_class is None:
            raise ValueError(f"未找到适配器: {adapter_type}")

        instance = adapter_class(self.settings, transport=self._transport)
        self._instances[adapter_type] = instance
        logger.info(f"创建适配器实例: {adapter_type.value} ({adapter_class.__name__})")
        return instance

    async def cleanup(self) -> None:
        """关闭所有适配器实例"""
        for adapter_type, instance in self._instances.items():
            try:
                await instance.close()
            except Exception as e:
                logger.warning(f"关闭适配器失败 {adapter_type.value}: {e}")

        self._instances.clear()


def create_adapter(
    adapter_type: RelayStationAdapter,
    settings: Optional[HttpSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StationAdapter:
    """创建一个独立的适配器实例"""
    return AdapterRegistry(settings, transport).get_adapter(adapter_type)
