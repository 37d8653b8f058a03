"""
连接探测
"""

from relay_core.station_models import ConnectionTestResult
from relay_core.utils.logger import get_logger

from .backend import StationBackend

logger = get_logger(__name__)


class ConnectionProbe:
    """调用后端的连接测试，把所有失败转换成 success=False 的结果"""

    def __init__(self, backend: StationBackend):
        self.backend = backend

    async def test(self, station_id: str) -> ConnectionTestResult:
        try:
            return await self.backend.test_station_connection(station_id)
        except Exception as e:
            # 探测失败不能中断初始加载
            logger.warning(f"连接测试失败: {e}", station_id=station_id, fetch="connection_test")
            return ConnectionTestResult(success=False, message=f"Connection test failed: {e}")
