"""
Health check API endpoints
健康检查API接口
"""

import time

from fastapi import APIRouter

from relay_core.config_models import AppConfig


def create_health_router(config: AppConfig) -> APIRouter:
    """创建健康检查相关的API路由"""

    router = APIRouter(tags=["health"])

    @router.get("/")
    async def root():
        return {
            "message": config.system.name,
            "version": config.system.version,
            "status": "running",
        }

    @router.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "version": config.system.version,
            "timestamp": int(time.time()),
        }

    return router
