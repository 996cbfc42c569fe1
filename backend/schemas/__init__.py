"""
数据验证模式目录
"""

from .auth import UserCreate, UserLogin, UserInfo, AuthResult
from .response import message, paginate

__all__ = [
    # 认证
    "UserCreate", "UserLogin", "UserInfo", "AuthResult",
    # 响应
    "message", "paginate"
]
