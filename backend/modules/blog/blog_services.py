"""
博客业务逻辑
文章的增删改查，修改与删除仅限作者本人
"""

import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from core.auth_service import AuthService
from core.errors import AuthException, ErrorCode, NotFoundException, PermissionException, ValidationException
from core.pagination import PageResult, PaginationParams, paginate
from core.security import TokenData

from .blog_models import BlogPost, BlogPostTag, utcnow

logger = logging.getLogger(__name__)

MAX_TAG_LENGTH = 50


def clean_tags(tags: Optional[List[str]]) -> List[str]:
    """去除空白与空标签，重复标签保留首次出现的位置"""
    result = []
    for tag in tags or []:
        name = tag.strip()
        if not name or name in result:
            continue
        if len(name) > MAX_TAG_LENGTH:
            raise ValidationException(f"标签长度不能超过 {MAX_TAG_LENGTH} 个字符")
        result.append(name)
    return result


def validate_post_fields(title: str, content: str):
    """标题和正文不能为空（纯空白也视为空）"""
    if not title or not title.strip():
        raise ValidationException("标题不能为空")
    if not content or not content.strip():
        raise ValidationException("正文不能为空")


class BlogService:
    """博客服务"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_posts(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        author_id: Optional[int] = None,
        tag: Optional[str] = None,
        keyword: Optional[str] = None
    ) -> PageResult:
        """
        获取文章列表（按创建时间倒序）

        Raises:
            ValidationException: page 或 limit 不是正整数
        """
        params = PaginationParams.create(page, limit)
        query = select(BlogPost)

        if author_id is not None:
            query = query.where(BlogPost.author_id == author_id)

        if keyword:
            query = query.where(BlogPost.title.contains(keyword, autoescape=True))

        # 标签筛选（子查询）
        if tag:
            tag_subquery = select(BlogPostTag.post_id).where(BlogPostTag.name == tag.strip())
            query = query.where(BlogPost.id.in_(tag_subquery))

        query = query.order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
        return await paginate(self.db, query, params)

    async def get_post(self, post_id: int) -> BlogPost:
        """
        获取文章

        Raises:
            NotFoundException: 文章不存在
        """
        result = await self.db.execute(
            select(BlogPost).where(BlogPost.id == post_id)
        )
        post = result.scalar_one_or_none()
        if not post:
            raise NotFoundException("文章", post_id)
        return post

    async def get_owned_post(self, identity: TokenData, post_id: int) -> BlogPost:
        """
        获取文章并校验调用方是否为作者

        每次修改/删除都重新读取并比对，不缓存授权结果
        """
        post = await self.get_post(post_id)
        if post.author_id != identity.user_id:
            logger.warning(f"越权操作被拒绝 - 用户ID: {identity.user_id}, 文章ID: {post_id}")
            raise PermissionException("只有作者本人可以修改或删除此文章")
        return post

    async def create_post(
        self,
        identity: TokenData,
        title: str,
        content: str,
        tags: Optional[List[str]] = None
    ) -> BlogPost:
        """创建文章，作者为当前调用方"""
        validate_post_fields(title, content)

        # 令牌签名有效但账号已不存在时拒绝，不留下无主文章
        if not await AuthService(self.db).get_user(identity.user_id):
            raise AuthException(ErrorCode.TOKEN_INVALID, "令牌对应的用户不存在")

        post = BlogPost(
            title=title.strip(),
            content=content,
            author_id=identity.user_id
        )
        post.set_tags(clean_tags(tags))
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)

        logger.info(f"文章已创建 - 文章ID: {post.id}, 作者ID: {identity.user_id}")
        return post

    async def update_post(
        self,
        identity: TokenData,
        post_id: int,
        title: str,
        content: str,
        tags: Optional[List[str]] = None
    ) -> BlogPost:
        """
        更新文章（整体覆盖标题、正文、标签）

        并发修改以最后一次提交为准
        """
        post = await self.get_owned_post(identity, post_id)
        validate_post_fields(title, content)

        post.title = title.strip()
        post.content = content
        post.set_tags(clean_tags(tags))
        # 只改标签时 onupdate 不会触发
        post.updated_at = utcnow()

        await self.db.commit()
        await self.db.refresh(post)

        logger.info(f"文章已更新 - 文章ID: {post_id}, 作者ID: {identity.user_id}")
        return post

    async def delete_post(self, identity: TokenData, post_id: int) -> str:
        """删除文章，返回确认信息"""
        post = await self.get_owned_post(identity, post_id)

        await self.db.delete(post)
        await self.db.commit()

        logger.info(f"文章已删除 - 文章ID: {post_id}, 作者ID: {identity.user_id}")
        return "文章已删除"
