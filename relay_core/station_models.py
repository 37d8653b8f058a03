"""
中转站数据模型
Relay station domain shapes shared by the adapters, the service and the session controllers.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# NewAPI/OneAPI 默认的额度换算系数：500000 quota = $1
DEFAULT_QUOTA_PER_UNIT = 500000


class RelayStationAdapter(str, Enum):
    """中转站实现类型"""

    NEWAPI = "newapi"
    ONEAPI = "oneapi"
    CUSTOM = "custom"


class AuthMethod(str, Enum):
    """中转站认证方式"""

    BEARER_TOKEN = "bearer_token"
    API_KEY = "api_key"
    CUSTOM = "custom"


class CreateRelayStationRequest(BaseModel):
    """创建中转站请求（不含生成字段）"""

    name: str
    description: Optional[str] = None
    api_url: str
    adapter: RelayStationAdapter = RelayStationAdapter.NEWAPI
    auth_method: AuthMethod = AuthMethod.BEARER_TOKEN
    system_token: str
    user_id: Optional[str] = None  # NewAPI 站点需要
    adapter_config: Optional[dict[str, Any]] = None
    enabled: bool = True

    @field_validator("name", "api_url", "system_token")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("user_id", "description")
    @classmethod
    def empty_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class UpdateRelayStationRequest(BaseModel):
    """中转站部分更新"""

    name: Optional[str] = None
    description: Optional[str] = None
    api_url: Optional[str] = None
    system_token: Optional[str] = None
    user_id: Optional[str] = None
    enabled: Optional[bool] = None

    # 未设置的字段保持原值；显式传 null 只允许用于可空列
    @field_validator("name", "api_url", "system_token", "enabled")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value

    @field_validator("name", "api_url", "system_token")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("user_id", "description")
    @classmethod
    def empty_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class RelayStation(BaseModel):
    """中转站配置快照"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: Optional[str] = None
    api_url: str
    adapter: RelayStationAdapter
    auth_method: AuthMethod
    system_token: str
    user_id: Optional[str] = None
    adapter_config: Optional[dict[str, Any]] = None
    enabled: bool = True
    created_at: int = 0
    updated_at: int = 0


class StationInfo(BaseModel):
    """中转站返回的站点信息"""

    name: str
    announcement: Optional[str] = None
    api_url: str
    version: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    quota_per_unit: Optional[int] = None


class UserInfo(BaseModel):
    """中转站用户信息"""

    user_id: str
    username: Optional[str] = None
    email: Optional[str] = None
    balance_remaining: Optional[float] = None
    amount_used: Optional[float] = None
    request_count: Optional[int] = None
    status: Optional[str] = None
    # 原始额度，用于按站点自己的 quota_per_unit 重新换算
    quota: Optional[int] = None
    used_quota: Optional[int] = None
    metadata: Optional[dict[str, Any]] = None


class ConnectionTestResult(BaseModel):
    """连接测试结果，不持久化"""

    success: bool
    message: str
    response_time: Optional[int] = None  # ms
    status_code: Optional[int] = None
    details: Optional[dict[str, Any]] = None


class RelayStationToken(BaseModel):
    """中转站令牌"""

    id: str
    station_id: str
    name: str
    token: str
    user_id: Optional[str] = None
    enabled: bool = False
    expires_at: Optional[int] = None
    metadata: Optional[dict[str, Any]] = None
    created_at: int = 0

    @property
    def masked_token(self) -> str:
        """显示用的截断令牌"""
        if len(self.token) <= 12:
            return self.token[:4] + "..." if self.token else ""
        return f"{self.token[:8]}...{self.token[-4:]}"


class CreateTokenRequest(BaseModel):
    name: str
    remain_quota: Optional[int] = None
    expired_time: Optional[int] = None
    unlimited_quota: Optional[bool] = None
    model_limits_enabled: Optional[bool] = None
    model_limits: Optional[str] = None
    group: Optional[str] = None
    allow_ips: Optional[str] = None

    model_config = ConfigDict(protected_namespaces=())


class UpdateTokenRequest(BaseModel):
    id: int
    name: Optional[str] = None
    remain_quota: Optional[int] = None
    expired_time: Optional[int] = None
    unlimited_quota: Optional[bool] = None
    model_limits_enabled: Optional[bool] = None
    model_limits: Optional[str] = None
    group: Optional[str] = None
    allow_ips: Optional[str] = None

    model_config = ConfigDict(protected_namespaces=())


class StationLogEntry(BaseModel):
    """中转站使用日志"""

    model_config = ConfigDict(protected_namespaces=())

    id: str
    timestamp: int
    level: str = "info"
    message: str = ""
    user_id: Optional[str] = None
    request_id: Optional[str] = None
    model_name: Optional[str] = None
    token_name: Optional[str] = None
    channel: Optional[int] = None
    group: Optional[str] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    quota: Optional[int] = None
    use_time: Optional[int] = None
    is_stream: Optional[bool] = None
    metadata: Optional[dict[str, Any]] = None


class LogPage(BaseModel):
    """一页日志"""

    items: list[StationLogEntry] = Field(default_factory=list)
    page: int
    page_size: int
    total: int = 0
