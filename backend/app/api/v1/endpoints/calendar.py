from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import Any, Dict, List

from app.core.database import get_db
from app.core.exceptions import EventNotFoundError, ProjectNotFoundError, TaskNotFoundError, ValidationError
from app.core.logging_config import logger
from app.models.event import Event
from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.event import EventCreate, EventResponse
from app.modules.auth.dependencies import get_current_user
from app.modules.auth.permissions import Action, ensure_can

router = APIRouter()


def _event_options():
    return (
        selectinload(Event.project),
        selectinload(Event.task),
        selectinload(Event.creator),
    )


async def _get_event(db: AsyncSession, event_id: str) -> Event:
    result = await db.execute(
        select(Event).options(*_event_options()).where(Event.id == event_id)
    )
    event = result.scalar_one_or_none()
    if not event:
        raise EventNotFoundError(event_id)
    return event


def project_deadline_event(project: Project) -> Dict[str, Any]:
    """Read-time calendar entry for a project deadline; never stored"""
    return {
        "id": f"project-deadline-{project.id}",
        "title": f"Project deadline: {project.name}",
        "date": project.deadline,
        "description": project.description,
        "send_alert": False,
        "kind": "project-deadline",
        "project": project,
        "task": None,
        "creator": project.creator,
        "created_at": project.created_at,
    }


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    if event_data.project_id and await db.get(Project, event_data.project_id) is None:
        raise ProjectNotFoundError(event_data.project_id)
    if event_data.task_id:
        task = await db.get(Task, event_data.task_id)
        if task is None:
            raise TaskNotFoundError(event_data.task_id)
        if event_data.project_id and task.project_id != event_data.project_id:
            raise ValidationError("Task does not belong to this project", field="task_id")

    event = Event(
        title=event_data.title,
        date=event_data.date,
        description=event_data.description,
        send_alert=event_data.send_alert,
        project_id=event_data.project_id,
        task_id=event_data.task_id,
        created_by_id=current_user.id,
    )
    db.add(event)
    await db.commit()

    return await _get_event(db, event.id)


@router.get("/events", response_model=List[EventResponse])
async def list_events(
    include_deadlines: bool = Query(True, description="Merge in project deadlines as virtual events"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Events by date, then newest first; project deadlines merged in"""
    result = await db.execute(
        select(Event)
        .options(*_event_options())
        .order_by(Event.date.asc(), Event.created_at.desc())
    )
    events: List[Any] = list(result.scalars().all())

    if include_deadlines:
        projects = await db.execute(
            select(Project)
            .options(selectinload(Project.creator))
            .where(Project.deadline.is_not(None))
        )
        events.extend(project_deadline_event(p) for p in projects.scalars().all())
        # stable: keeps the created_at ordering among same-date events
        events.sort(key=lambda e: e["date"] if isinstance(e, dict) else e.date)

    return events


@router.delete("/events/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Owner or admin"""
    event = await _get_event(db, event_id)
    ensure_can(current_user, Action.EVENT_DELETE, event)

    await db.delete(event)
    await db.commit()

    logger.info(f"Event {event_id} deleted by {current_user.email}")
    return {"msg": "Event deleted", "id": event_id}
