"""
中转站基础适配器
所有中转站适配器的基类，定义标准接口
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from relay_core.config_models import Http as HttpSettings
from relay_core.exceptions import (
    ErrorCode,
    InvalidResponseException,
    NetworkException,
)
from relay_core.station_models import (
    ConnectionTestResult,
    CreateTokenRequest,
    LogPage,
    RelayStation,
    RelayStationToken,
    StationInfo,
    UpdateTokenRequest,
    UserInfo,
)


class StationAdapter(ABC):
    """中转站适配器基类"""

    def __init__(
        self,
        settings: Optional[HttpSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        初始化适配器

        Args:
            settings: HTTP超时等配置
            transport: 自定义httpx传输层（测试时注入MockTransport）
        """
        self.settings = settings or HttpSettings()
        self._transport = transport

        # HTTP客户端
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """获取HTTP客户端（懒加载）"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self.settings.timeout, connect=self.settings.connect_timeout
                ),
                headers={"User-Agent": self.settings.user_agent},
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """关闭HTTP客户端"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request_json(
        self, method: str, url: str, operation: str, **kwargs: Any
    ) -> dict[str, Any]:
        """
        发送请求并返回JSON对象

        传输失败和非2xx响应统一抛出NetworkException，非JSON对象抛出InvalidResponseException
        """
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise NetworkException(
                ErrorCode.CONNECTION_TIMEOUT,
                f"{operation} timed out: {e}",
                url=url,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise NetworkException(
                ErrorCode.NETWORK_ERROR,
                f"{operation} failed: {e}",
                url=url,
                cause=e,
            ) from e

        if not response.is_success:
            raise NetworkException(
                ErrorCode.HTTP_STATUS_ERROR,
                f"{operation} failed: HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise InvalidResponseException(
                f"{operation} returned non-JSON body", url=url, cause=e
            ) from e

        if not isinstance(payload, dict):
            raise InvalidResponseException(f"{operation} returned unexpected payload", url=url)
        return payload

    @abstractmethod
    async def get_station_info(self, station: RelayStation) -> StationInfo:
        """获取站点信息"""

    @abstractmethod
    async def get_user_info(self, station: RelayStation, user_id: str) -> UserInfo:
        """获取用户额度信息"""

    @abstractmethod
    async def get_logs(
        self, station: RelayStation, page: int = 1, page_size: int = 10
    ) -> LogPage:
        """获取一页使用日志"""

    @abstractmethod
    async def test_connection(self, station: RelayStation) -> ConnectionTestResult:
        """
        测试站点连通性

        网络错误也应返回 success=False 的结果而不是抛出异常
        """

    @abstractmethod
    async def list_tokens(
        self, station: RelayStation, page: int = 1, size: int = 10
    ) -> list[RelayStationToken]:
        """获取令牌列表"""

    @abstractmethod
    async def create_token(
        self, station: RelayStation, token_data: CreateTokenRequest
    ) -> RelayStationToken:
        """创建令牌"""

    @abstractmethod
    async def update_token(
        self, station: RelayStation, token_id: str, token_data: UpdateTokenRequest
    ) -> RelayStationToken:
        """更新令牌"""

    @abstractmethod
    async def delete_token(self, station: RelayStation, token_id: str) -> None:
        """删除令牌"""
