"""
统一响应格式
API返回的标准JSON结构
"""

from typing import Any, List


def message(text: str) -> dict:
    """操作确认响应"""
    return {"message": text}


def paginate(items: List[Any], total: int, page: int, limit: int, key: str = "posts") -> dict:
    """分页响应"""
    return {
        key: items,
        "total": total,
        "page": page,
        "limit": limit
    }
