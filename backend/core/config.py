"""
系统配置管理
统一管理所有配置项，支持环境变量覆盖
"""

import logging
from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

# 获取backend目录的绝对路径
BACKEND_DIR = Path(__file__).parent.parent.resolve()
ENV_FILE = BACKEND_DIR / ".env"

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    """系统配置"""

    # 应用信息
    app_name: str = "Blog API"
    app_version: str = "1.0.0"
    env: str = "development"  # 运行模式：development / production
    port: int = 8000

    # 数据库连接串
    database_url: str = "sqlite+aiosqlite:///./blog.db"

    # JWT令牌配置
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7天

    # 跨域配置（前端地址）
    client_origin: str = "http://localhost:5173"

    # 前端构建产物目录（可选）
    frontend_path: Optional[str] = None

    @field_validator("env")
    @classmethod
    def validate_env(cls, v):
        """只允许 development / production"""
        v = v.strip().lower()
        if v not in ("development", "production"):
            raise ValueError("ENV 只能是 development 或 production")
        return v

    @property
    def debug(self) -> bool:
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore"
    )


_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """
    获取配置单例
    支持运行时重新加载
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()

        # 安全检查: 如果是生产环境且使用默认密钥，发出警告
        if _settings_instance.is_production and _settings_instance.jwt_secret == DEFAULT_JWT_SECRET:
            logging.getLogger("core.config").warning(
                "🚨 [安全警告] 您正在生产环境模式下使用默认的 JWT_SECRET！"
                "请立即在环境变量或 .env 文件中配置 JWT_SECRET。"
            )
    return _settings_instance


def reload_settings() -> Settings:
    """重新加载配置（测试或配置变更时使用）"""
    global _settings_instance
    _settings_instance = None
    return get_settings()
