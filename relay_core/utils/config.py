"""配置管理模块"""

import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..config_models import AppConfig
from ..exceptions import ConfigurationException, ErrorCode
from .logger import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent


def load_config(config_path: Optional[Union[str, Path]] = None) -> dict[str, Any]:
    """
    加载配置文件

    Args:
        config_path: 配置文件路径，默认为 config/config.yaml

    Returns:
        配置字典（已完成环境变量替换）
    """
    # 加载环境变量
    load_dotenv()

    # 确定配置文件路径
    if config_path is None:
        config_path = PROJECT_ROOT / "config" / "config.yaml"

        # 如果 config.yaml 不存在，尝试 example.yaml
        if not config_path.exists():
            config_path = PROJECT_ROOT / "config" / "example.yaml"
            logger.warning(f"配置文件 config/config.yaml 不存在，使用示例配置 {config_path}")

    # 读取配置文件
    try:
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigurationException(
            ErrorCode.CONFIG_LOAD_FAILED,
            f"配置文件未找到: {config_path}",
            config_path=str(config_path),
        ) from None
    except yaml.YAMLError as e:
        raise ConfigurationException(
            ErrorCode.CONFIG_PARSE_ERROR,
            f"配置文件格式错误: {e}",
            config_path=str(config_path),
            cause=e,
        ) from e

    if not isinstance(config, dict):
        raise ConfigurationException(
            ErrorCode.CONFIG_INVALID,
            "配置文件顶层必须是映射",
            config_path=str(config_path),
        )

    # 环境变量替换
    return _replace_env_vars(config)  # type: ignore[no-any-return]


def _replace_env_vars(obj: Any) -> Any:
    """
    递归替换配置中的环境变量占位符

    支持 ${VAR_NAME} 和 ${VAR_NAME:default_value}
    """
    if isinstance(obj, dict):
        return {key: _replace_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_replace_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        env_var = obj[2:-1]
        default_value = None

        if ":" in env_var:
            env_var, default_value = env_var.split(":", 1)

        value = os.getenv(env_var, default_value)
        if value is None:
            logger.warning(f"环境变量 {env_var} 未设置，使用占位符")
            return obj
        return value
    else:
        return obj


def get_app_config(config_path: Optional[Union[str, Path]] = None) -> AppConfig:
    """加载并校验应用配置"""
    raw_config = load_config(config_path)
    try:
        return AppConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigurationException(
            ErrorCode.CONFIG_INVALID,
            f"配置校验失败: {e}",
            config_path=str(config_path) if config_path else None,
            cause=e,
        ) from e
