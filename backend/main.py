"""
Blog API - 主入口
基于FastAPI的博客服务：用户认证 + 文章增删改查

功能：
- JWT Bearer 认证
- 文章作者权限校验
- 请求日志中间件
- 安全响应头中间件
- 健康检查端点
- 标准化错误处理
"""

import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from core.config import get_settings
from core.database import init_db, close_db
from core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from core.errors import register_exception_handlers

settings = get_settings()

# 配置日志
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# 减少第三方库的日志输出
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # ==================== 启动阶段 ====================
    current_settings = get_settings()
    logger.info(f"🚀 正在启动 {current_settings.app_name} v{current_settings.app_version} ({current_settings.env})...")

    await init_db()
    logger.info(f"🎉 {current_settings.app_name} 启动完成! 访问: http://localhost:{current_settings.port}")

    yield

    # ==================== 关闭阶段 ====================
    logger.info("🛑 系统关闭中...")
    await close_db()
    logger.info("👋 系统已关闭")


# ==================== 创建应用 ====================
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="博客 REST API：认证与文章管理",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


# ==================== 中间件配置（顺序重要，后添加的先执行） ====================

# 1. CORS 跨域配置（仅允许配置的前端地址）
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.client_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# 2. 安全响应头中间件
app.add_middleware(SecurityHeadersMiddleware)

# 3. 请求日志中间件
app.add_middleware(
    RequestLoggingMiddleware,
    slow_request_threshold=1.0  # 超过1秒的请求记录为慢请求
)


# ==================== 异常处理器 ====================
register_exception_handlers(app)


# ==================== 注册路由 ====================
from routers import auth, health
from modules.blog.blog_router import router as blog_router

app.include_router(auth.router)
app.include_router(blog_router, prefix="/api", tags=["博客"])
app.include_router(health.router)


@app.get("/api", include_in_schema=False)
async def api_info():
    """API 信息"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/api/docs",
        "health": "/health"
    }


# ==================== 前端静态文件（可选） ====================
frontend_path = settings.frontend_path

if frontend_path and os.path.isdir(frontend_path):
    assets_path = os.path.join(frontend_path, "assets")
    if os.path.isdir(assets_path):
        app.mount("/assets", StaticFiles(directory=assets_path), name="assets")
    logger.info(f"📁 挂载前端页面: {frontend_path}")

    async def spa_history_fallback(full_path: str):
        """
        前端 History 路由回退：
        - 排除 /api 等后端路径
        - 其他路径统一返回前端 index.html
        """
        if full_path.startswith(("api/", "health")):
            raise HTTPException(status_code=404, detail="Not Found")

        index_path = os.path.join(frontend_path, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        raise HTTPException(status_code=404, detail="Not Found")

    app.add_api_route("/{full_path:path}", spa_history_fallback, include_in_schema=False)


# ==================== 启动入口 ====================
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug
    )
