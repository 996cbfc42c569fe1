"""
健康检查路由
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.database import ping_db

router = APIRouter(tags=["健康检查"])


@router.get("/health")
async def health_check():
    """系统健康状态（数据库不可用时返回 503）"""
    settings = get_settings()
    db_ok = await ping_db()
    return JSONResponse(
        status_code=200 if db_ok else 503,
        content={
            "status": "healthy" if db_ok else "unhealthy",
            "version": settings.app_version,
            "database": "connected" if db_ok else "unavailable"
        }
    )
