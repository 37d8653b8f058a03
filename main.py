#!/usr/bin/env python3
"""
Relay Station Manager - 中转站管理服务
"""

import argparse
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relay_api.errors import register_exception_handlers
from relay_api.health import create_health_router
from relay_api.relay_stations import create_relay_station_router
from relay_core.adapters import AdapterRegistry
from relay_core.config_models import AppConfig
from relay_core.database import Database
from relay_core.manager import RelayStationManager
from relay_core.services import RelayStationService
from relay_core.utils.config import get_app_config
from relay_core.utils.logger import get_logger, setup_logging, shutdown_logging

logger = get_logger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    创建FastAPI应用

    Args:
        config: 应用配置，为空时从配置文件加载
        transport: 访问中转站使用的httpx传输层
    """
    config = config or get_app_config()

    database = Database(config.database)
    manager = RelayStationManager(database)
    registry = AdapterRegistry(config.http, transport=transport)
    service = RelayStationService(manager, registry)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        await database.init_db()
        logger.info(f"{config.system.name} {config.system.version} 已启动")

        yield

        try:
            await service.close()
            await database.close()
            logger.info(f"{config.system.name} 已关闭")
        except Exception as e:
            logger.error(f"[ERROR] Error during shutdown: {e}")

    app = FastAPI(
        title=config.system.name,
        description="Manage relay station accounts: quota, tokens, usage logs",
        version=config.system.version,
        debug=config.server.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.state.config = config
    app.state.service = service

    app.include_router(create_health_router(config))
    app.include_router(create_relay_station_router(service, config.session.log_page_size))

    return app


def main():
    """主函数"""
    parser = argparse.ArgumentParser(description="Relay Station Manager")
    parser.add_argument("--config", default=None, help="Path to the YAML config file")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")

    args = parser.parse_args()

    config = get_app_config(args.config)
    setup_logging(config.logging.model_dump(exclude={"file"}), config.logging.file)

    host = args.host or config.server.host
    port = args.port or config.server.port
    app = create_app(config)

    print(
        f"""
{config.system.name} Starting...
Server: http://{host}:{port}
Docs: http://{host}:{port}/docs
    """
    )

    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_config=None,  # 使用我们自己的日志配置
        )
    finally:
        shutdown_logging()


if __name__ == "__main__":
    main()
