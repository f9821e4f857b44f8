from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import List

from app.core.database import get_db
from app.models.repository_link import RepositoryLink
from app.models.user import User
from app.schemas.repository_link import RepositoryLinkCreate, RepositoryLinkResponse
from app.modules.auth.dependencies import get_current_user

router = APIRouter()


def _link_options():
    return (selectinload(RepositoryLink.creator), selectinload(RepositoryLink.members))


@router.post("", response_model=RepositoryLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_repository_link(
    link_data: RepositoryLinkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Share a GitHub repository; the creator is its first member"""
    link = RepositoryLink(url=link_data.github_url, created_by_id=current_user.id, members=[current_user])
    db.add(link)
    await db.commit()

    result = await db.execute(
        select(RepositoryLink)
        .options(*_link_options())
        .where(RepositoryLink.id == link.id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.get("", response_model=List[RepositoryLinkResponse])
async def list_repository_links(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(RepositoryLink).options(*_link_options()).order_by(RepositoryLink.created_at.desc())
    )
    return result.scalars().all()
