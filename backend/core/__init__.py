"""
核心模块
提供框架的基础设施和通用功能

导出列表：
- 配置管理: get_settings, Settings
- 数据库: Base, get_db, async_session
- 安全认证: get_current_user, create_token, decode_token, hash_password, verify_password
- 分页工具: paginate, PageResult, PaginationParams
- 错误处理: AppException 及其子类
"""

# 配置管理
from .config import get_settings, Settings, reload_settings

# 数据库
from .database import Base, get_db, async_session, init_db, close_db

# 安全认证
from .security import (
    get_current_user,
    create_token,
    decode_token,
    hash_password,
    verify_password,
    TokenData
)

# 分页工具
from .pagination import paginate, PageResult, PaginationParams

# 错误处理
from .errors import (
    ErrorCode,
    AppException,
    ValidationException,
    AuthException,
    PermissionException,
    NotFoundException,
    ConflictException,
    register_exception_handlers
)

__all__ = [
    "get_settings", "Settings", "reload_settings",
    "Base", "get_db", "async_session", "init_db", "close_db",
    "get_current_user", "create_token", "decode_token",
    "hash_password", "verify_password", "TokenData",
    "paginate", "PageResult", "PaginationParams",
    "ErrorCode", "AppException", "ValidationException", "AuthException",
    "PermissionException", "NotFoundException", "ConflictException",
    "register_exception_handlers",
]
