"""
Pydantic models for configuration validation.
"""

from typing import Optional

from pydantic import BaseModel, Field


class System(BaseModel):
    name: str = "Relay Station Manager"
    version: str = "0.1.0"


class Server(BaseModel):
    host: str = "127.0.0.1"
    port: int = 7610
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Database(BaseModel):
    url: str = "sqlite+aiosqlite:///./relay_stations.db"
    echo: bool = False


class Http(BaseModel):
    """访问中转站时使用的HTTP超时配置（秒）"""

    timeout: float = 30.0
    connect_timeout: float = 10.0
    probe_timeout: float = 10.0
    user_agent: str = "RelayStationManager/0.1"


class Logging(BaseModel):
    level: str = "INFO"
    format: str = Field(default="text", pattern="^(text|json)$")
    file: Optional[str] = "logs/relay-station-manager.log"
    max_file_size: int = 50 * 1024 * 1024
    backup_count: int = 5


class Session(BaseModel):
    """详情视图会话的默认值"""

    log_page_size: int = Field(default=10, gt=0)


class AppConfig(BaseModel):
    system: System = Field(default_factory=System)
    server: Server = Field(default_factory=Server)
    database: Database = Field(default_factory=Database)
    http: Http = Field(default_factory=Http)
    logging: Logging = Field(default_factory=Logging)
    session: Session = Field(default_factory=Session)

    model_config = {"extra": "allow"}
