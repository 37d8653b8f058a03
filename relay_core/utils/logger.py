"""日志系统模块 - 结构化格式、日志轮换"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from pythonjsonlogger import jsonlogger

DEFAULT_LOG_CONFIG: dict[str, Any] = {
    "level": "INFO",
    "format": "text",  # text or json
    "max_file_size": 50 * 1024 * 1024,  # 50MB
    "backup_count": 5,
}


class RelayLogger:
    """Relay Station Manager 日志系统"""

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        log_file: Optional[Union[str, Path]] = None,
    ):
        self.config = {**DEFAULT_LOG_CONFIG, **(config or {})}
        self.log_file: Optional[Path] = Path(log_file) if log_file else None
        self.context_data: dict[str, Any] = {}

        self._setup_standard_logging()

    def _build_file_handler(self, log_format: str) -> Optional[logging.Handler]:
        """创建轮换文件处理器"""
        if not self.log_file:
            return None

        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_file,
                maxBytes=self.config["max_file_size"],
                backupCount=self.config["backup_count"],
                encoding="utf-8",
            )
        except OSError as e:
            print(f"Failed to setup file logging: {e}", file=sys.stderr)
            return None

        if log_format == "json":
            formatter: logging.Formatter = jsonlogger.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        file_handler.setFormatter(formatter)
        return file_handler

    def _setup_standard_logging(self) -> None:
        """设置标准日志系统和structlog"""
        log_level = str(self.config["level"]).upper()
        log_format = self.config["format"]

        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        file_handler = self._build_file_handler(log_format)
        if file_handler:
            handlers.append(file_handler)

        processors = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if log_format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )

        # 配置根日志记录器
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            handlers=handlers,
            force=True,  # 覆盖现有配置
        )

        # 禁用第三方库的噪音日志
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("aiosqlite").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    def set_context(self, **context_data: Any) -> None:
        """设置上下文数据（如station_id等），绑定到所有后续日志"""
        self.context_data.update(context_data)
        structlog.contextvars.bind_contextvars(**context_data)

    def clear_context(self) -> None:
        """清除上下文数据"""
        self.context_data.clear()
        structlog.contextvars.clear_contextvars()


# 全局日志实例
_global_logger: Optional[RelayLogger] = None


def setup_logging(
    config: Optional[dict[str, Any]] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> RelayLogger:
    """
    设置全局日志系统

    Args:
        config: 日志配置字典 (level, format, max_file_size, backup_count)
        log_file: 日志文件路径，为空时只输出到stdout

    Returns:
        RelayLogger实例
    """
    global _global_logger

    _global_logger = RelayLogger(config, log_file)
    return _global_logger


def get_logger(name: Optional[str] = None) -> Any:
    """
    获取日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        structlog日志记录器
    """
    return structlog.get_logger(name or "relay_core")


def get_relay_logger() -> Optional[RelayLogger]:
    """获取全局RelayLogger实例，未初始化时返回None"""
    return _global_logger


def shutdown_logging() -> None:
    """关闭全局日志系统"""
    global _global_logger
    if _global_logger:
        _global_logger.clear_context()
        logging.shutdown()
        _global_logger = None
