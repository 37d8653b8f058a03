"""
数据库连接和会话管理
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from relay_core.config_models import Database as DatabaseSettings
from relay_core.models.base import Base
from relay_core.utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """异步数据库引擎与会话工厂"""

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self.settings = settings or DatabaseSettings()
        self.url = self.settings.url

        if "sqlite" in self.url:
            # SQLite特殊配置
            self.engine = create_async_engine(
                self.url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=self.settings.echo,
            )
        else:
            self.engine = create_async_engine(
                self.url,
                pool_pre_ping=True,
                echo=self.settings.echo,
            )

        # 创建异步会话工厂
        self.session_maker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """获取数据库会话上下文管理器"""
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def init_db(self) -> None:
        """初始化数据库，创建缺失的表"""
        logger.info(f"正在初始化数据库: {self._safe_url()}")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("数据库初始化完成")

    async def close(self) -> None:
        """关闭数据库连接"""
        await self.engine.dispose()
        logger.info("数据库连接已关闭")

    def _safe_url(self) -> str:
        """隐藏连接串中的密码"""
        return self.engine.url.render_as_string(hide_password=True)
