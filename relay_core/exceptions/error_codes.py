"""
统一错误码体系
中转站管理相关的标准化错误码
"""

from enum import Enum


class ErrorCode(Enum):
    """系统错误码枚举"""

    # 通用错误 (1000-1099)
    UNKNOWN_ERROR = "E1000"
    INVALID_REQUEST = "E1001"
    INVALID_PARAMETER = "E1002"
    RESOURCE_NOT_FOUND = "E1003"

    # 配置错误 (1100-1199)
    CONFIG_LOAD_FAILED = "E1100"
    CONFIG_INVALID = "E1101"
    CONFIG_PARSE_ERROR = "E1103"

    # 中转站错误 (1300-1399)
    STATION_NOT_FOUND = "E1300"
    STATION_CONFIG_INVALID = "E1301"
    STATION_RESPONSE_INVALID = "E1302"
    STATION_REQUEST_FAILED = "E1303"

    # 网络错误 (1500-1599)
    NETWORK_ERROR = "E1500"
    CONNECTION_TIMEOUT = "E1501"
    HTTP_STATUS_ERROR = "E1505"

    # 数据库错误 (1800-1899)
    DATABASE_ERROR = "E1800"
    DATABASE_QUERY_FAILED = "E1802"
    DATABASE_CONSTRAINT_VIOLATION = "E1803"


# 错误码到消息的映射
ERROR_MESSAGES = {
    ErrorCode.UNKNOWN_ERROR: "未知错误",
    ErrorCode.INVALID_REQUEST: "无效的请求",
    ErrorCode.INVALID_PARAMETER: "无效的参数",
    ErrorCode.RESOURCE_NOT_FOUND: "资源未找到",
    ErrorCode.CONFIG_LOAD_FAILED: "配置加载失败",
    ErrorCode.CONFIG_INVALID: "配置无效",
    ErrorCode.CONFIG_PARSE_ERROR: "配置解析错误",
    ErrorCode.STATION_NOT_FOUND: "中转站未找到",
    ErrorCode.STATION_CONFIG_INVALID: "中转站配置无效",
    ErrorCode.STATION_RESPONSE_INVALID: "中转站响应格式无效",
    ErrorCode.STATION_REQUEST_FAILED: "中转站请求失败",
    ErrorCode.NETWORK_ERROR: "网络错误",
    ErrorCode.CONNECTION_TIMEOUT: "连接超时",
    ErrorCode.HTTP_STATUS_ERROR: "HTTP状态码异常",
    ErrorCode.DATABASE_ERROR: "数据库错误",
    ErrorCode.DATABASE_QUERY_FAILED: "数据库查询失败",
    ErrorCode.DATABASE_CONSTRAINT_VIOLATION: "数据库约束违反",
}


def get_error_message(error_code: ErrorCode, default: str = "未知错误") -> str:
    """获取错误码对应的消息"""
    return ERROR_MESSAGES.get(error_code, default)
