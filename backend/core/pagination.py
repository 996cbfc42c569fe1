"""
统一分页工具
提供标准化的分页查询功能
"""

from typing import List, Any, Optional
from pydantic import BaseModel, Field

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import ValidationException

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class PaginationParams(BaseModel):
    """分页参数"""
    page: int = Field(default=DEFAULT_PAGE, description="页码，从1开始")
    limit: int = Field(default=DEFAULT_LIMIT, description="每页数量")

    @classmethod
    def create(cls, page: Optional[int] = None, limit: Optional[int] = None) -> "PaginationParams":
        """
        创建分页参数，未指定时使用默认值

        Raises:
            ValidationException: page 或 limit 不是正整数
        """
        page = DEFAULT_PAGE if page is None else page
        limit = DEFAULT_LIMIT if limit is None else limit
        if page < 1:
            raise ValidationException("page 必须为正整数")
        if limit < 1:
            raise ValidationException("limit 必须为正整数")
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        """计算偏移量"""
        return (self.page - 1) * self.limit


class PageResult(BaseModel):
    """分页结果"""
    items: List[Any] = Field(description="数据列表")
    total: int = Field(description="总记录数")
    page: int = Field(description="当前页码")
    limit: int = Field(description="每页数量")


async def paginate(
    db: AsyncSession,
    query,
    params: PaginationParams
) -> PageResult:
    """
    通用分页查询

    Args:
        db: 数据库会话
        query: SQLAlchemy select 查询（已包含筛选和排序）
        params: 分页参数

    Usage:
        query = select(User).order_by(User.id)
        result = await paginate(db, query, PaginationParams.create(page=1, limit=20))
    """
    # 总数基于去掉排序的原始查询，不受分页窗口影响
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(params.offset).limit(params.limit))
    items = list(result.scalars().all())

    return PageResult(items=items, total=total, page=params.page, limit=params.limit)
