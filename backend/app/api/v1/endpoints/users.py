from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.models.user import User
from app.schemas.auth import UserResponse
from app.schemas.user import DashboardResponse, ProfileImageUpdate, UserListItem
from app.modules.auth.dependencies import get_current_user
from app.services.application_service import ApplicationService
from app.services.project_service import ProjectService

router = APIRouter()


@router.get("", response_model=List[UserListItem])
async def list_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(User).order_by(User.created_at))
    return result.scalars().all()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Everything the dashboard page shows, in one call"""
    users = await db.execute(select(User).order_by(User.created_at))
    projects = ProjectService(db)
    applications = ApplicationService(db)

    return {
        "users": users.scalars().all(),
        "projects": await projects.list_projects(),
        "my_projects": await projects.list_member_projects(current_user),
        "applications": await applications.list_applications(),
        "my_applications": await applications.list_user_applications(current_user),
    }


@router.put("/me/profile-image", response_model=UserResponse)
async def update_profile_image(
    data: ProfileImageUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Set the profile image URL or data URI; null clears it"""
    image = data.profile_image or None
    if image and len(image) > settings.PROFILE_IMAGE_MAX_LENGTH:
        raise ValidationError("Profile image is too large", field="profile_image")

    current_user.profile_image = image
    await db.commit()
    await db.refresh(current_user)
    return current_user
