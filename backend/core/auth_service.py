"""
认证业务逻辑
用户注册、登录与当前用户查询
"""

import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models import User
from schemas.auth import AuthResult, UserInfo
from .errors import AuthException, ConflictException, ErrorCode
from .security import TokenData, create_token, hash_password, verify_password, verify_token

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """邮箱统一去空白并转小写，保证唯一性比较不区分大小写"""
    return email.strip().lower()


class AuthService:
    """认证服务"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_user(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    def _issue(self, user: User) -> AuthResult:
        """为用户签发令牌"""
        token = create_token(TokenData(user_id=user.id, email=user.email))
        return AuthResult(token=token, user=UserInfo.model_validate(user))

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """
        注册用户

        Raises:
            ConflictException: 邮箱已被注册
        """
        email = normalize_email(email)
        if await self.get_user_by_email(email):
            raise ConflictException("该邮箱已被注册")

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password)
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # 并发注册同一邮箱，由唯一索引兜底
            await self.db.rollback()
            raise ConflictException("该邮箱已被注册")
        await self.db.refresh(user)

        logger.info(f"新用户注册 - 用户ID: {user.id}")
        return self._issue(user)

    async def login(self, email: str, password: str) -> AuthResult:
        """
        用户登录

        Raises:
            AuthException: 邮箱不存在或密码错误（不区分两种情况）
        """
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"登录失败 - 邮箱: {normalize_email(email)}")
            raise AuthException(ErrorCode.LOGIN_FAILED)

        logger.info(f"用户登录成功 - 用户ID: {user.id}")
        return self._issue(user)

    async def get_current_user(self, token: Optional[str]) -> UserInfo:
        """
        根据令牌获取当前用户

        Raises:
            AuthException: 令牌缺失、无效、过期，或令牌主体已不存在
        """
        token_data = verify_token(token)
        return await self.get_user_info(token_data)

    async def get_user_info(self, identity: TokenData) -> UserInfo:
        """根据已验证的身份获取用户公开信息"""
        user = await self.get_user(identity.user_id)
        if not user:
            raise AuthException(ErrorCode.TOKEN_INVALID, "令牌对应的用户不存在")
        return UserInfo.model_validate(user)
