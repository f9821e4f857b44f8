"""
Task Service - task board operations

Creating a task with a deadline also writes one calendar event per project
member. The task and its events are committed together.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, or_
from sqlalchemy.orm import selectinload

from app.models.application import Application
from app.models.event import Event
from app.models.project import Project, project_members
from app.models.task import Task
from app.models.user import User
from app.modules.auth.permissions import Action, ensure_can
from app.schemas.task import TaskCreate, TaskUpdate
from app.services.project_service import ProjectService
from app.core.exceptions import (
    ApplicationNotFoundError,
    TaskNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from app.core.logging_config import logger
from app.core.types import generate_uuid, utcnow


NON_NULLABLE_FIELDS = {"name", "description", "status", "priority"}


def task_load_options():
    return (
        selectinload(Task.project).selectinload(Project.members),
        selectinload(Task.application),
        selectinload(Task.creator),
        selectinload(Task.assignee),
    )


class TaskService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========== Queries ==========

    async def get_task(self, task_id: str) -> Task:
        result = await self.db.execute(
            select(Task)
            .options(*task_load_options())
            .where(Task.id == str(task_id))
            .execution_options(populate_existing=True)
        )
        task = result.scalar_one_or_none()
        if not task:
            raise TaskNotFoundError(task_id)
        return task

    async def list_tasks(self) -> List[Task]:
        """Every task, archived included"""
        result = await self.db.execute(
            select(Task).options(*task_load_options()).order_by(Task.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_user_tasks(self, user: User) -> List[Task]:
        """
        Active tasks relevant to the user: in a project they belong to, or
        created by or assigned to them. Archived tasks are left out.
        """
        member_projects = select(project_members.c.project_id).where(project_members.c.user_id == user.id)
        result = await self.db.execute(
            select(Task)
            .options(*task_load_options())
            .where(
                Task.is_archived.is_(False),
                or_(
                    Task.project_id.in_(member_projects),
                    Task.created_by_id == user.id,
                    Task.assignee_id == user.id,
                ),
            )
            .order_by(Task.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_application(self, user: User, project_id: str, application_id: str) -> List[Task]:
        """Caller's own tasks for a project/application pair"""
        result = await self.db.execute(
            select(Task)
            .options(*task_load_options())
            .where(
                Task.project_id == project_id,
                Task.application_id == application_id,
                Task.created_by_id == user.id,
            )
            .order_by(Task.created_at.desc())
        )
        return list(result.scalars().all())

    async def query_tasks(
        self,
        created_by: Optional[str] = None,
        application_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> List[Task]:
        query = select(Task).options(*task_load_options())
        if created_by:
            query = query.where(Task.created_by_id == created_by)
        if application_id:
            query = query.where(Task.application_id == application_id)
        if project_id:
            query = query.where(Task.project_id == project_id)
        result = await self.db.execute(query.order_by(Task.created_at.desc()))
        return list(result.scalars().all())

    # ========== Mutations ==========

    async def _ensure_user_exists(self, user_id: str) -> None:
        if await self.db.get(User, str(user_id)) is None:
            raise UserNotFoundError(user_id)

    async def create_task(self, creator: User, data: TaskCreate) -> Task:
        project = await ProjectService(self.db).get_project(data.project_id)

        if data.application_id:
            application = await self.db.get(Application, str(data.application_id))
            if application is None:
                raise ApplicationNotFoundError(data.application_id)
            if application.project_id != project.id:
                raise ValidationError("Application does not belong to this project", field="application_id")

        if data.assignee_id:
            await self._ensure_user_exists(data.assignee_id)

        task = Task(
            id=generate_uuid(),
            project_id=project.id,
            application_id=data.application_id,
            name=data.name,
            description=data.description,
            status=data.status,
            priority=data.priority,
            deadline=data.deadline,
            created_by_id=creator.id,
            assignee_id=data.assignee_id,
        )
        self.db.add(task)

        events_created = 0
        if data.deadline:
            # One reminder per member, owned by that member
            for member in project.members:
                self.db.add(Event(
                    title=f"Task deadline: {task.name}",
                    date=data.deadline,
                    description=f"Deadline for task '{task.name}' in project '{project.name}'",
                    send_alert=True,
                    project_id=project.id,
                    task_id=task.id,
                    created_by_id=member.id,
                ))
                events_created += 1

        await self.db.commit()

        logger.info(
            f"Task created: {task.name} ({task.id}) in project {project.id}, {events_created} deadline events",
            extra={"event_type": "task_created", "task_id": task.id, "events_created": events_created}
        )
        return await self.get_task(task.id)

    async def update_task(self, actor: User, task_id: str, data: TaskUpdate) -> Task:
        task = await self.get_task(task_id)
        ensure_can(actor, Action.TASK_UPDATE, task)

        changes = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS & changes.keys():
            if changes[field] is None:
                raise ValidationError(f"{field} cannot be null", field=field)

        if changes.get("assignee_id"):
            await self._ensure_user_exists(changes["assignee_id"])

        for field, value in changes.items():
            setattr(task, field, value)

        await self.db.commit()
        return await self.get_task(task_id)

    async def delete_task(self, actor: User, task_id: str) -> None:
        task = await self.get_task(task_id)
        ensure_can(actor, Action.TASK_DELETE, task)

        await self.db.execute(
            delete(Event).where(Event.task_id == task.id).execution_options(synchronize_session=False)
        )
        await self.db.delete(task)
        await self.db.commit()

        logger.info(f"Task deleted: {task.id} by {actor.email}")

    async def archive_task(self, actor: User, task_id: str) -> Task:
        task = await self.get_task(task_id)
        ensure_can(actor, Action.TASK_ARCHIVE, task)

        task.is_archived = True
        task.archived_at = utcnow()
        await self.db.commit()

        return await self.get_task(task_id)
