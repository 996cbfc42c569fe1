"""
博客数据模型
表名遵循隔离协议：blog_前缀
"""

from datetime import datetime, timezone
from typing import List
from sqlalchemy import String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base
from models import User


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BlogPost(Base):
    """博客文章"""
    __tablename__ = "blog_posts"
    __table_args__ = {"extend_existing": True, "comment": "博客文章表"}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)  # Markdown 正文

    # 作者（创建后不可变更）
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sys_users.id", ondelete="CASCADE"),
        index=True
    )

    # 时间
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # 关联关系
    author: Mapped[User] = relationship("User", lazy="selectin", viewonly=True)
    tag_links: Mapped[List["BlogPostTag"]] = relationship(
        "BlogPostTag",
        order_by="BlogPostTag.position",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    @property
    def tags(self) -> List[str]:
        """按录入顺序返回标签"""
        return [link.name for link in self.tag_links]

    def set_tags(self, tags: List[str]):
        """整体替换标签（旧的关联行由 delete-orphan 清理）"""
        self.tag_links = [
            BlogPostTag(name=name, position=index)
            for index, name in enumerate(tags)
        ]


class BlogPostTag(Base):
    """文章标签（有序）"""
    __tablename__ = "blog_post_tags"
    __table_args__ = {"extend_existing": True, "comment": "文章标签表"}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(50), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)
