"""
博客数据验证模式
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """创建文章"""
    title: str = Field(..., max_length=200)
    content: str
    tags: List[str] = []


class PostUpdate(BaseModel):
    """更新文章（整体覆盖标题、正文和标签）"""
    title: str = Field(..., max_length=200)
    content: str
    tags: List[str] = []


class AuthorInfo(BaseModel):
    """作者信息"""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class PostInfo(BaseModel):
    """文章信息"""
    id: int
    title: str
    content: str
    tags: List[str] = []
    author_id: int
    author: Optional[AuthorInfo] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostQuery(BaseModel):
    """文章查询参数"""
    page: int = 1
    limit: int = 10
    author: Optional[int] = None
    tag: Optional[str] = None
    keyword: Optional[str] = None
