"""
统一异常基类
中转站管理系统所有异常的基础结构
"""

import traceback
from datetime import datetime
from typing import Any, Optional

from .error_codes import ErrorCode, get_error_message


class BaseStationException(Exception):
    """中转站管理基础异常类"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.error_code = error_code
        self.message = message or get_error_message(error_code)
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now()
        self.traceback_str = traceback.format_exc() if cause else None

        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式"""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(error_code={self.error_code.value}, message='{self.message}')"


class ConfigurationException(BaseStationException):
    """配置相关异常"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        config_path: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if config_path:
            details["config_path"] = config_path

        super().__init__(error_code, message, details, **kwargs)


class InvalidParameterException(BaseStationException):
    """参数校验异常"""

    def __init__(self, message: str, parameter: Optional[str] = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if parameter:
            details["parameter"] = parameter

        super().__init__(ErrorCode.INVALID_PARAMETER, message, details, **kwargs)


class StationNotFoundException(BaseStationException):
    """中转站不存在"""

    def __init__(self, station_id: str, message: Optional[str] = None, **kwargs: Any):
        super().__init__(
            ErrorCode.STATION_NOT_FOUND,
            message or f"Station not found: {station_id}",
            {"station_id": station_id},
            **kwargs,
        )
        self.station_id = station_id


class NetworkException(BaseStationException):
    """网络相关异常 - 传输失败或非2xx响应"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code

        super().__init__(error_code, message, details, **kwargs)
        self.status_code = status_code


class InvalidResponseException(BaseStationException):
    """中转站返回了无法解析的数据"""

    def __init__(self, message: Optional[str] = None, url: Optional[str] = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if url:
            details["url"] = url

        super().__init__(ErrorCode.STATION_RESPONSE_INVALID, message, details, **kwargs)


class DatabaseException(BaseStationException):
    """数据库相关异常"""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        message: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(error_code, message, **kwargs)
