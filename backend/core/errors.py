"""
标准错误体系
提供统一的异常定义和异常处理

所有错误统一以 {"message": str, "status": int} 的格式返回给调用方
"""

import logging
from typing import Optional, Dict
from enum import IntEnum
from fastapi import status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(IntEnum):
    """
    内部错误码

    错误码规范：
    - 1xxx: 系统级错误
    - 2xxx: 认证/授权错误
    - 3xxx: 业务通用错误
    """

    # ==================== 系统级错误 (1xxx) ====================
    INTERNAL_ERROR = 1000           # 服务器内部错误
    SERVICE_UNAVAILABLE = 1004      # 服务不可用

    # ==================== 认证/授权错误 (2xxx) ====================
    UNAUTHORIZED = 2001             # 未认证（未登录）
    TOKEN_INVALID = 2003            # 令牌无效或已过期
    PERMISSION_DENIED = 2004        # 权限不足
    LOGIN_FAILED = 2007             # 登录失败

    # ==================== 业务通用错误 (3xxx) ====================
    VALIDATION_ERROR = 3001         # 参数验证失败
    RESOURCE_NOT_FOUND = 3002       # 资源不存在
    RESOURCE_EXISTS = 3003          # 资源已存在
    METHOD_NOT_ALLOWED = 3006       # 请求方法不允许


# 错误码对应的默认消息
ERROR_MESSAGES: Dict[int, str] = {
    ErrorCode.INTERNAL_ERROR: "服务器内部错误，请稍后重试",
    ErrorCode.SERVICE_UNAVAILABLE: "服务暂时不可用",
    ErrorCode.UNAUTHORIZED: "请先登录",
    ErrorCode.TOKEN_INVALID: "无效的认证凭据",
    ErrorCode.PERMISSION_DENIED: "没有权限执行此操作",
    ErrorCode.LOGIN_FAILED: "邮箱或密码错误",
    ErrorCode.VALIDATION_ERROR: "参数验证失败",
    ErrorCode.RESOURCE_NOT_FOUND: "请求的资源不存在",
    ErrorCode.RESOURCE_EXISTS: "资源已存在",
    ErrorCode.METHOD_NOT_ALLOWED: "请求方法不允许",
}

# 错误码对应的 HTTP 状态码
ERROR_HTTP_STATUS: Dict[int, int] = {
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.SERVICE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_INVALID: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.LOGIN_FAILED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.RESOURCE_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.METHOD_NOT_ALLOWED: status.HTTP_405_METHOD_NOT_ALLOWED,
}

# HTTP 状态码反查错误码（用于框架抛出的 HTTPException）
HTTP_STATUS_CODES: Dict[int, int] = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.PERMISSION_DENIED,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    409: ErrorCode.RESOURCE_EXISTS,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def error_body(message: str, http_status: int) -> dict:
    """构建统一错误响应体"""
    return {"message": message, "status": http_status}


class AppException(Exception):
    """
    应用异常基类

    用于抛出业务异常，携带消息和 HTTP 状态码

    Usage:
        raise AppException(ErrorCode.RESOURCE_NOT_FOUND, "用户不存在")
    """

    def __init__(
        self,
        code: int = ErrorCode.INTERNAL_ERROR,
        message: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, "未知错误")
        self.http_status = ERROR_HTTP_STATUS.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """转换为字典"""
        return error_body(self.message, self.http_status)

    def to_response(self) -> JSONResponse:
        """转换为 JSONResponse"""
        return JSONResponse(
            status_code=self.http_status,
            content=self.to_dict(),
            headers=self.headers
        )


class ValidationException(AppException):
    """参数验证异常（400）"""

    def __init__(self, message: str = "参数验证失败"):
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class AuthException(AppException):
    """认证异常（401）"""

    def __init__(
        self,
        code: int = ErrorCode.UNAUTHORIZED,
        message: Optional[str] = None
    ):
        super().__init__(code=code, message=message, headers={"WWW-Authenticate": "Bearer"})


class PermissionException(AppException):
    """权限异常（403）：身份有效，但不是资源所有者"""

    def __init__(self, message: str = "没有权限执行此操作"):
        super().__init__(code=ErrorCode.PERMISSION_DENIED, message=message)


class NotFoundException(AppException):
    """资源不存在异常（404）"""

    def __init__(self, resource: str = "资源", resource_id=None):
        message = f"{resource}不存在"
        if resource_id is not None:
            message = f"{resource} (ID: {resource_id}) 不存在"
        super().__init__(code=ErrorCode.RESOURCE_NOT_FOUND, message=message)


class ConflictException(AppException):
    """资源冲突异常（409）"""

    def __init__(self, message: str = "资源已存在"):
        super().__init__(code=ErrorCode.RESOURCE_EXISTS, message=message)


# ==================== 异常处理器 ====================

async def app_exception_handler(request, exc: AppException):
    """AppException 异常处理器"""
    return exc.to_response()


def register_exception_handlers(app):
    """
    注册异常处理器

    在 main.py 中调用：
        from core.errors import register_exception_handlers
        register_exception_handlers(app)
    """
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException as StarletteHTTPException

    app.add_exception_handler(AppException, app_exception_handler)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request, exc: RequestValidationError):
        parts = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query", "path"))
            parts.append(f"{field}: {error['msg']}" if field else error["msg"])

        message = "参数验证失败"
        if parts:
            message = f"{message}: " + "; ".join(parts)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(message, status.HTTP_400_BAD_REQUEST)
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request, exc: StarletteHTTPException):
        code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
        message = str(exc.detail) if exc.detail else ERROR_MESSAGES.get(code, "请求失败")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message, exc.status_code),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request, exc: Exception):
        """全局异常捕获"""
        logger.error(f"未处理异常: {request.method} {request.url.path} | {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(
                ERROR_MESSAGES[ErrorCode.INTERNAL_ERROR],
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        )
