"""
认证路由
用户注册、登录、当前用户
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth_service import AuthService
from core.database import get_db
from core.security import TokenData, get_current_user
from schemas import UserCreate, UserLogin

router = APIRouter(prefix="/api/auth", tags=["认证"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, db: AsyncSession = Depends(get_db)):
    """用户注册"""
    service = AuthService(db)
    result = await service.register(data.name, data.email, data.password)
    return result.model_dump()


@router.post("/login")
async def login(data: UserLogin, db: AsyncSession = Depends(get_db)):
    """用户登录"""
    service = AuthService(db)
    result = await service.login(data.email, data.password)
    return result.model_dump()


@router.get("/me")
async def get_me(
    current_user: TokenData = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取当前用户信息"""
    service = AuthService(db)
    user = await service.get_user_info(current_user)
    return {"user": user.model_dump()}
