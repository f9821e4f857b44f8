from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import List

from app.core.database import get_db
from app.core.exceptions import CommentNotFoundError, PostNotFoundError
from app.models.post import Comment, Post
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.post import CommentCreate, PostCreate, PostResponse
from app.modules.auth.dependencies import get_current_user
from app.modules.auth.permissions import Action, ensure_can

router = APIRouter()


def _post_options():
    return (
        selectinload(Post.creator),
        selectinload(Post.comments).selectinload(Comment.creator),
    )


async def _get_post(db: AsyncSession, post_id: str) -> Post:
    result = await db.execute(
        select(Post)
        .options(*_post_options())
        .where(Post.id == post_id)
        .execution_options(populate_existing=True)
    )
    post = result.scalar_one_or_none()
    if not post:
        raise PostNotFoundError(post_id)
    return post


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    post = Post(title=post_data.title, content=post_data.content, created_by_id=current_user.id)
    db.add(post)
    await db.commit()
    return await _get_post(db, post.id)


@router.get("", response_model=List[PostResponse])
async def list_posts(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Newest first, with comments"""
    result = await db.execute(
        select(Post).options(*_post_options()).order_by(Post.created_at.desc())
    )
    return result.scalars().all()


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Author only"""
    post = await _get_post(db, post_id)
    ensure_can(current_user, Action.POST_DELETE, post)

    await db.delete(post)
    await db.commit()
    return {"msg": "Post deleted", "id": post_id}


@router.post("/{post_id}/comments", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    post = await _get_post(db, post_id)
    post.comments.append(Comment(content=comment_data.content, created_by_id=current_user.id))
    await db.commit()
    return await _get_post(db, post_id)


@router.delete("/{post_id}/comments/{comment_id}", response_model=PostResponse)
async def delete_comment(
    post_id: str,
    comment_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Comment author only; 404 when the comment is not on this post"""
    post = await _get_post(db, post_id)
    comment = post.find_comment(comment_id)
    if comment is None:
        raise CommentNotFoundError(comment_id)
    ensure_can(current_user, Action.COMMENT_DELETE, comment)

    post.comments.remove(comment)
    await db.commit()
    return await _get_post(db, post_id)
