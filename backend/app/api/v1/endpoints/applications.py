from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.models.user import User
from app.schemas.application import ApplicationCreate, ApplicationResponse
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.services.application_service import ApplicationService

router = APIRouter()


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    application_data: ApplicationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Submit an idea for a project; starts as pending"""
    return await ApplicationService(db).create_application(current_user, application_data)


@router.get("", response_model=List[ApplicationResponse])
async def list_applications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await ApplicationService(db).list_applications()


@router.get("/my", response_model=List[ApplicationResponse])
async def list_my_applications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await ApplicationService(db).list_user_applications(current_user)


@router.put("/{application_id}/{action}", response_model=ApplicationResponse)
async def decide_application(
    application_id: str,
    action: str,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Approve or reject (admin). Approval adds the author to the project."""
    return await ApplicationService(db).decide(application_id, action)
