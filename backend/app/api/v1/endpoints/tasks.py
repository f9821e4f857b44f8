from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.services.task_service import TaskService

router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create a task; a deadline also puts an event on every member's calendar"""
    return await TaskService(db).create_task(current_user, task_data)


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """All tasks, archived included"""
    return await TaskService(db).list_tasks()


@router.get("/my", response_model=List[TaskResponse])
async def list_my_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Active tasks in the caller's projects or created by / assigned to the caller"""
    return await TaskService(db).list_user_tasks(current_user)


@router.get("/by-user", response_model=List[TaskResponse])
async def query_tasks(
    created_by: Optional[str] = Query(None),
    application_id: Optional[str] = Query(None),
    project_id: Optional[str] = Query(None),
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Filtered task query (admin)"""
    return await TaskService(db).query_tasks(
        created_by=created_by,
        application_id=application_id,
        project_id=project_id,
    )


@router.get("/project/{project_id}/application/{application_id}", response_model=List[TaskResponse])
async def list_application_tasks(
    project_id: str,
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await TaskService(db).list_for_application(current_user, project_id, application_id)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await TaskService(db).get_task(task_id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await TaskService(db).update_task(current_user, task_id, task_data)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await TaskService(db).delete_task(current_user, task_id)
    return {"msg": "Task deleted", "id": task_id}


@router.put("/{task_id}/archive", response_model=TaskResponse)
async def archive_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await TaskService(db).archive_task(current_user, task_id)
