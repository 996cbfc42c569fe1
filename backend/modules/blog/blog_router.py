"""
博客API路由
RESTful风格
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.pagination import PageResult
from core.security import get_current_user, TokenData
from schemas import message, paginate

from .blog_schemas import PostCreate, PostUpdate, PostInfo, PostQuery
from .blog_services import BlogService

router = APIRouter()


def _page_response(result: PageResult) -> dict:
    items = [PostInfo.model_validate(p).model_dump(mode="json") for p in result.items]
    return paginate(items, result.total, result.page, result.limit)


@router.get("/posts")
async def list_posts(
    query: PostQuery = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """获取文章列表（公开）"""
    service = BlogService(db)
    result = await service.get_posts(
        page=query.page,
        limit=query.limit,
        author_id=query.author,
        tag=query.tag,
        keyword=query.keyword
    )
    return _page_response(result)


@router.get("/posts/mine")
async def list_my_posts(
    page: int = 1,
    limit: int = 10,
    db: AsyncSession = Depends(get_db),
    user: TokenData = Depends(get_current_user)
):
    """获取我的文章列表"""
    service = BlogService(db)
    result = await service.get_posts(page=page, limit=limit, author_id=user.user_id)
    return _page_response(result)


@router.get("/posts/{post_id}")
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db)
):
    """获取文章详情"""
    service = BlogService(db)
    post = await service.get_post(post_id)
    return PostInfo.model_validate(post).model_dump(mode="json")


@router.post("/posts", status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    db: AsyncSession = Depends(get_db),
    user: TokenData = Depends(get_current_user)
):
    """创建文章"""
    service = BlogService(db)
    post = await service.create_post(user, data.title, data.content, data.tags)
    return PostInfo.model_validate(post).model_dump(mode="json")


@router.put("/posts/{post_id}")
async def update_post(
    post_id: int,
    data: PostUpdate,
    db: AsyncSession = Depends(get_db),
    user: TokenData = Depends(get_current_user)
):
    """更新文章（仅作者）"""
    service = BlogService(db)
    post = await service.update_post(user, post_id, data.title, data.content, data.tags)
    return PostInfo.model_validate(post).model_dump(mode="json")


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    user: TokenData = Depends(get_current_user)
):
    """删除文章（仅作者）"""
    service = BlogService(db)
    text = await service.delete_post(user, post_id)
    return message(text)
