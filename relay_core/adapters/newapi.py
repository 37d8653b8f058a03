"""
NewAPI适配器
NewAPI / OneAPI 兼容站点的HTTP接口实现
"""

import json
import time
from typing import Any, Optional

import httpx

from relay_core.exceptions import (
    BaseStationException,
    ErrorCode,
    InvalidResponseException,
)
from relay_core.station_models import (
    DEFAULT_QUOTA_PER_UNIT,
    ConnectionTestResult,
    CreateTokenRequest,
    LogPage,
    RelayStation,
    RelayStationToken,
    StationInfo,
    StationLogEntry,
    UpdateTokenRequest,
    UserInfo,
)
from relay_core.utils.logger import get_logger

from .base import StationAdapter

logger = get_logger(__name__)

# 日志 type 字段到级别的映射
LOG_LEVELS = {1: "info", 2: "api", 3: "warn", 4: "error"}

USER_STATUS = {1: "active", 0: "disabled"}

# 新建令牌的默认参数
TOKEN_DEFAULTS: dict[str, Any] = {
    "remain_quota": DEFAULT_QUOTA_PER_UNIT,
    "expired_time": -1,
    "unlimited_quota": True,
    "model_limits_enabled": False,
    "model_limits": "",
    "group": "",
    "allow_ips": "",
}


def _as_int(value: Any) -> Optional[int]:
    """只接受真正的整数（bool除外）"""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _id_str(value: Any) -> Optional[str]:
    int_value = _as_int(value)
    if int_value is not None:
        return str(int_value)
    return _as_str(value)


class NewApiAdapter(StationAdapter):
    """NewAPI 适配器"""

    @staticmethod
    def _user_header(station: RelayStation) -> str:
        # 未配置用户ID时NewAPI默认使用 "1"
        return station.user_id or "1"

    def _auth_headers(self, station: RelayStation, user_id: Optional[str] = None) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {station.system_token}",
            "New-API-User": user_id or self._user_header(station),
        }

    def _unwrap(self, payload: dict[str, Any], operation: str, url: str) -> Any:
        """取出 {"success": ..., "data": ...} 信封中的 data"""
        if payload.get("success") is False:
            message = payload.get("message") or "unknown error"
            raise BaseStationException(
                ErrorCode.STATION_REQUEST_FAILED,
                f"{operation} failed: {message}",
                details={"url": url},
            )
        return payload.get("data")

    def _unwrap_object(self, payload: dict[str, Any], operation: str, url: str) -> dict[str, Any]:
        data = self._unwrap(payload, operation, url)
        if not isinstance(data, dict):
            raise InvalidResponseException(f"{operation}: invalid response format", url=url)
        return data

    async def get_station_info(self, station: RelayStation) -> StationInfo:
        url = f"{station.api_url}/api/status"
        payload = await self._request_json(
            "GET",
            url,
            "Get station info",
            headers={"New-API-User": self._user_header(station)},
        )
        data = self._unwrap_object(payload, "Get station info", url)

        announcement = None
        announcements = data.get("announcements")
        if isinstance(announcements, list) and announcements:
            first = announcements[0]
            if isinstance(first, dict):
                announcement = _as_str(first.get("content"))

        return StationInfo(
            name=_as_str(data.get("system_name")) or station.name,
            announcement=announcement,
            api_url=station.api_url,
            version=_as_str(data.get("version")),
            quota_per_unit=_as_int(data.get("quota_per_unit")),
            metadata={"response": data},
        )

    async def get_user_info(self, station: RelayStation, user_id: str) -> UserInfo:
        actual_user_id = user_id or self._user_header(station)
        url = f"{station.api_url}/api/user/self"
        payload = await self._request_json(
            "GET",
            url,
            "Get user info",
            headers=self._auth_headers(station, actual_user_id),
        )
        data = self._unwrap_object(payload, "Get user info", url)

        quota = _as_int(data.get("quota"))
        used_quota = _as_int(data.get("used_quota"))
        email = _as_str(data.get("email"))

        return UserInfo(
            user_id=_id_str(data.get("id")) or actual_user_id,
            username=_as_str(data.get("username")),
            email=email or None,
            # 先按默认系数换算，会话层会用站点自己的 quota_per_unit 重新换算
            balance_remaining=quota / DEFAULT_QUOTA_PER_UNIT if quota is not None else None,
            amount_used=used_quota / DEFAULT_QUOTA_PER_UNIT if used_quota is not None else None,
            request_count=_as_int(data.get("request_count")),
            status=USER_STATUS.get(_as_int(data.get("status")), "unknown"),
            quota=quota,
            used_quota=used_quota,
            metadata={"response": data},
        )

    def _parse_log_entry(self, log: Any) -> StationLogEntry:
        log_obj = log if isinstance(log, dict) else {}

        # other 字段是JSON字符串，包含额外的性能指标
        other_data = None
        other_raw = log_obj.get("other")
        if isinstance(other_raw, str) and other_raw:
            try:
                other_data = json.loads(other_raw)
            except ValueError:
                other_data = None

        model_name = _as_str(log_obj.get("model_name"))
        prompt_tokens = _as_int(log_obj.get("prompt_tokens"))
        completion_tokens = _as_int(log_obj.get("completion_tokens"))
        quota = _as_int(log_obj.get("quota"))
        log_id = _id_str(log_obj.get("id"))

        return StationLogEntry(
            id=log_id or "",
            timestamp=_as_int(log_obj.get("created_at")) or 0,
            level=LOG_LEVELS.get(_as_int(log_obj.get("type")), "info"),
            message=(
                f"API call - model: {model_name or 'unknown'} | prompt: {prompt_tokens or 0}"
                f" | completion: {completion_tokens or 0} | quota: {quota or 0}"
            ),
            user_id=_id_str(log_obj.get("user_id")),
            request_id=log_id,
            model_name=model_name,
            token_name=_as_str(log_obj.get("token_name")),
            channel=_as_int(log_obj.get("channel")),
            group=_as_str(log_obj.get("group")),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            quota=quota,
            use_time=_as_int(log_obj.get("use_time")),
            is_stream=log_obj.get("is_stream") if isinstance(log_obj.get("is_stream"), bool) else None,
            metadata={"raw": log, "other": other_data},
        )

    async def get_logs(
        self, station: RelayStation, page: int = 1, page_size: int = 10
    ) -> LogPage:
        url = f"{station.api_url}/api/log/self"
        params = {
            "p": page,
            "page_size": page_size,
            "type": 0,
            "token_name": "",
            "model_name": "",
            "start_timestamp": 0,
            "end_timestamp": int(time.time()),
            "group": "",
        }
        payload = await self._request_json(
            "GET", url, "Get logs", params=params, headers=self._auth_headers(station)
        )
        data = self._unwrap_object(payload, "Get logs", url)

        items = data.get("items")
        if not isinstance(items, list):
            items = []

        return LogPage(
            items=[self._parse_log_entry(log) for log in items],
            page=page,
            page_size=page_size,
            total=_as_int(data.get("total")) or 0,
        )

    async def test_connection(self, station: RelayStation) -> ConnectionTestResult:
        url = f"{station.api_url}/api/status"
        start_time = time.monotonic()

        try:
            response = await self.client.get(
                url,
                headers={"New-API-User": self._user_header(station)},
                timeout=self.settings.probe_timeout,
            )
        except httpx.HTTPError as e:
            logger.warning(f"中转站连接测试失败 {station.id}: {e}")
            return ConnectionTestResult(success=False, message=f"Connection failed: {e}")

        response_time = int((time.monotonic() - start_time) * 1000)
        if response.is_success:
            return ConnectionTestResult(
                success=True,
                message="Connection successful",
                response_time=response_time,
                status_code=response.status_code,
            )
        return ConnectionTestResult(
            success=False,
            message=f"HTTP {response.status_code}",
            response_time=response_time,
            status_code=response.status_code,
        )

    def _parse_token(
        self, station: RelayStation, token: dict[str, Any], fallback_id: str = ""
    ) -> RelayStationToken:
        expired_time = _as_int(token.get("expired_time"))
        status = _as_int(token.get("status"))

        return RelayStationToken(
            id=_id_str(token.get("id")) or fallback_id,
            station_id=station.id,
            name=_as_str(token.get("name")) or "",
            token=_as_str(token.get("key")) or "",
            user_id=_id_str(token.get("user_id")),
            enabled=status == 1,
            expires_at=expired_time if expired_time not in (None, -1) else None,
            metadata={
                "raw": token,
                "used_quota": token.get("used_quota"),
                "remain_quota": token.get("remain_quota"),
                "group": token.get("group"),
            },
            created_at=_as_int(token.get("created_time")) or 0,
        )

    async def list_tokens(
        self, station: RelayStation, page: int = 1, size: int = 10
    ) -> list[RelayStationToken]:
        url = f"{station.api_url}/api/token/"
        payload = await self._request_json(
            "GET",
            url,
            "List tokens",
            params={"p": page, "size": size},
            headers=self._auth_headers(station),
        )
        data = self._unwrap(payload, "List tokens", url)

        # 新版返回 {"items": [...]}，旧版直接返回列表
        if isinstance(data, dict):
            tokens = data.get("items")
        else:
            tokens = data
        if not isinstance(tokens, list):
            raise InvalidResponseException("List tokens: invalid response format", url=url)

        return [self._parse_token(station, token) for token in tokens if isinstance(token, dict)]

    async def create_token(
        self, station: RelayStation, token_data: CreateTokenRequest
    ) -> RelayStationToken:
        url = f"{station.api_url}/api/token/"
        body = {**TOKEN_DEFAULTS, "name": token_data.name}
        body.update(token_data.model_dump(exclude_none=True, exclude={"name"}))

        payload = await self._request_json(
            "POST", url, "Create token", json=body, headers=self._auth_headers(station)
        )
        data = self._unwrap_object(payload, "Create token", url)
        token = self._parse_token(station, data)
        if not token.created_at:
            token = token.model_copy(update={"created_at": int(time.time())})

        logger.info(f"中转站 {station.id} 创建令牌: {token.name}")
        return token

    async def update_token(
        self, station: RelayStation, token_id: str, token_data: UpdateTokenRequest
    ) -> RelayStationToken:
        url = f"{station.api_url}/api/token/"
        # 只提交显式设置的字段
        body = token_data.model_dump(exclude_none=True)

        payload = await self._request_json(
            "PUT", url, "Update token", json=body, headers=self._auth_headers(station)
        )
        data = self._unwrap_object(payload, "Update token", url)
        return self._parse_token(station, data, fallback_id=token_id)

    async def delete_token(self, station: RelayStation, token_id: str) -> None:
        url = f"{station.api_url}/api/token/{token_id}"
        payload = await self._request_json(
            "DELETE", url, "Delete token", headers=self._auth_headers(station)
        )
        self._unwrap(payload, "Delete token", url)
        logger.info(f"中转站 {station.id} 删除令牌: {token_id}")
