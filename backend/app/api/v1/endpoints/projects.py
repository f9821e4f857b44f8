from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.models.user import User
from app.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectDeleteResponse,
    ProjectReportResponse,
)
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.services.project_service import ProjectService
from app.services.report_service import ReportService
from app.core.logging_config import logger

router = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a project (admin). The caller becomes its owner; members start empty."""
    return await ProjectService(db).create_project(current_user, project_data)


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """All projects, newest first"""
    return await ProjectService(db).list_projects()


@router.get("/my", response_model=List[ProjectResponse])
async def list_my_projects(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Projects the caller is a member of"""
    return await ProjectService(db).list_member_projects(current_user)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await ProjectService(db).get_project(project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Partial update (admin); unknown fields are rejected"""
    return await ProjectService(db).update_project(project_id, project_data)


@router.delete("/{project_id}", response_model=ProjectDeleteResponse)
async def delete_project(
    project_id: str,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a project with its tasks, applications and events (admin)"""
    counts = await ProjectService(db).delete_project(project_id)
    return {"msg": "Project deleted", "project_id": project_id, **counts}


@router.post("/{project_id}/join", response_model=ProjectResponse)
async def join_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await ProjectService(db).join(project_id, current_user)


@router.post("/{project_id}/leave", response_model=ProjectResponse)
async def leave_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await ProjectService(db).leave(project_id, current_user)


@router.post("/{project_id}/end", response_model=ProjectReportResponse)
async def end_project(
    project_id: str,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Close a project: render the final report, then delete the project and
    everything attached to it. Nothing is deleted if rendering fails.
    """
    pdf_url, summary = await ReportService(db).generate_project_report(project_id)
    counts = await ProjectService(db).delete_project(project_id)

    logger.info(f"Project {project_id} ended by {current_user.email}")
    return {
        "msg": "Project ended and report generated",
        "pdf_url": pdf_url,
        "summary": {**summary, **counts},
    }


@router.post("/{project_id}/report", response_model=ProjectReportResponse)
async def project_report(
    project_id: str,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Render the report without deleting anything (admin)"""
    pdf_url, summary = await ReportService(db).generate_project_report(project_id)
    return {"msg": "Report generated", "pdf_url": pdf_url, "summary": summary}
