"""
统一鉴权模块
提供JWT令牌生成、验证和密码处理功能
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import bcrypt
from jose import JWTError, jwt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, ValidationError

from .config import get_settings
from .errors import AuthException, ErrorCode, ValidationException

# Bearer令牌认证（缺失时由 get_current_user 统一返回 401）
security = HTTPBearer(auto_error=False)

# bcrypt 输入上限
MAX_PASSWORD_BYTES = 72


class TokenData(BaseModel):
    """令牌数据（已验证的调用方身份）"""
    user_id: int
    email: str


def hash_password(password: str) -> str:
    """
    加密密码
    bcrypt 限制密码长度不超过 72 字节，超长直接拒绝而不是截断
    """
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > MAX_PASSWORD_BYTES:
        raise ValidationException(f"密码不能超过 {MAX_PASSWORD_BYTES} 字节")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码"""
    password_bytes = plain_password.encode('utf-8')
    if len(password_bytes) > MAX_PASSWORD_BYTES:
        # 注册时已拒绝超长密码，不可能匹配
        return False
    hashed_bytes = hashed_password.encode('utf-8')

    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # 存储的哈希格式损坏
        return False


def create_token(data: TokenData, expires_delta: Optional[timedelta] = None) -> str:
    """
    创建JWT令牌

    Args:
        data: 令牌数据
        expires_delta: 过期时间增量，默认读取 jwt_expire_minutes
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)

    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": str(data.user_id),
        "email": data.email,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[TokenData]:
    """解码JWT令牌，无效或过期返回 None"""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return TokenData(user_id=int(payload["sub"]), email=payload["email"])
    except (JWTError, KeyError, TypeError, ValueError, ValidationError):
        return None


def verify_token(token: Optional[str]) -> TokenData:
    """验证令牌，失败抛出 AuthException"""
    if not token:
        raise AuthException(ErrorCode.UNAUTHORIZED)

    token_data = decode_token(token)
    if token_data is None:
        raise AuthException(ErrorCode.TOKEN_INVALID, "无效或已过期的认证凭据")
    return token_data


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenData:
    """
    获取当前用户（依赖注入用）

    受保护路由的访问控制入口：校验 Bearer 令牌，
    通过后将身份挂到 request.state.user 供后续处理使用
    """
    token = credentials.credentials if credentials else None
    token_data = verify_token(token)
    request.state.user = token_data
    return token_data
