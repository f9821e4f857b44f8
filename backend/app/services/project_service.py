"""
Project Service - project registry and membership

All membership changes go through here so the capacity invariant
(``len(members) <= capacity``) is checked on every path that adds members.
"""

from typing import Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, or_
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError

from app.models.project import Project, project_members
from app.models.application import Application
from app.models.task import Task
from app.models.event import Event
from app.models.user import User
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.core.exceptions import ProjectNotFoundError, MembershipError, ValidationError
from app.core.logging_config import logger


# Columns that accept a partial update but can never be cleared
NON_NULLABLE_FIELDS = {"name", "description", "type", "is_active"}


def project_load_options():
    return (
        selectinload(Project.creator),
        selectinload(Project.members),
    )


class ProjectService:
    """Project CRUD, join/leave and the delete cascade"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========== Queries ==========

    async def get_project(self, project_id: str) -> Project:
        """Project with creator and members loaded; 404 if absent"""
        result = await self.db.execute(
            select(Project)
            .options(*project_load_options())
            .where(Project.id == str(project_id))
            .execution_options(populate_existing=True)
        )
        project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError(project_id)
        return project

    async def list_projects(self) -> List[Project]:
        result = await self.db.execute(
            select(Project)
            .options(*project_load_options())
            .order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_member_projects(self, user: User) -> List[Project]:
        """Projects the user is a member of"""
        result = await self.db.execute(
            select(Project)
            .join(project_members, project_members.c.project_id == Project.id)
            .where(project_members.c.user_id == user.id)
            .options(*project_load_options())
            .order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    # ========== Mutations ==========

    async def create_project(self, owner: User, data: ProjectCreate) -> Project:
        project = Project(
            name=data.name,
            description=data.description,
            type=data.type,
            capacity=data.capacity,
            deadline=data.deadline,
            created_by_id=owner.id,
        )
        self.db.add(project)
        await self.db.commit()

        logger.info(f"Project created: {project.name} ({project.id}) by {owner.email}")
        return await self.get_project(project.id)

    async def update_project(self, project_id: str, data: ProjectUpdate) -> Project:
        """Apply only the fields present in the body"""
        project = await self.get_project(project_id)
        changes = data.model_dump(exclude_unset=True)

        for field in NON_NULLABLE_FIELDS & changes.keys():
            if changes[field] is None:
                raise ValidationError(f"{field} cannot be null", field=field)

        capacity = changes.get("capacity")
        if capacity is not None and capacity < len(project.members):
            raise ValidationError(
                f"Capacity cannot be lower than the current member count ({len(project.members)})",
                field="capacity"
            )

        for field, value in changes.items():
            setattr(project, field, value)

        await self.db.commit()
        return await self.get_project(project_id)

    async def join(self, project_id: str, user: User) -> Project:
        project = await self.get_project(project_id)

        if project.has_member(user.id):
            raise MembershipError("Already a member of this project", code="ALREADY_MEMBER", project_id=project.id)
        if project.is_full:
            raise MembershipError("Project is full", code="PROJECT_FULL", project_id=project.id)

        project.members.append(user)
        await self.commit_membership(project_id)

        logger.info(f"User {user.email} joined project {project.id} ({len(project.members)}/{project.capacity or '-'})")
        return await self.get_project(project_id)

    async def leave(self, project_id: str, user: User) -> Project:
        project = await self.get_project(project_id)

        member = next((m for m in project.members if str(m.id) == str(user.id)), None)
        if member is None:
            raise MembershipError("Not a member of this project", code="NOT_A_MEMBER", project_id=project.id)

        project.members.remove(member)
        await self.db.commit()

        logger.info(f"User {user.email} left project {project.id}")
        return await self.get_project(project_id)

    async def commit_membership(self, project_id: str) -> None:
        """
        Commit a pending membership change. A concurrent request that added
        the same member first trips the project_members primary key; that is
        reported as ALREADY_MEMBER.
        """
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Concurrent membership insert rejected for project {project_id}")
            raise MembershipError("Already a member of this project", code="ALREADY_MEMBER", project_id=project_id)

    def add_member(self, project: Project, user: User) -> bool:
        """
        Add ``user`` without committing. Returns False when already a member;
        raises MembershipError when the project is full.
        """
        if project.has_member(user.id):
            return False
        if project.is_full:
            raise MembershipError("Project is full", code="PROJECT_FULL", project_id=project.id)
        project.members.append(user)
        return True

    async def delete_project(self, project_id: str, commit: bool = True) -> Dict[str, int]:
        """
        Delete the project together with its events, tasks and applications.

        Everything happens in the session's current transaction and is
        committed once at the end, so a failure leaves nothing half-deleted.
        """
        project = await self.get_project(project_id)
        pid = project.id

        task_ids = select(Task.id).where(Task.project_id == pid)

        events_result = await self.db.execute(
            delete(Event)
            .where(or_(Event.project_id == pid, Event.task_id.in_(task_ids)))
            .execution_options(synchronize_session=False)
        )
        tasks_result = await self.db.execute(
            delete(Task).where(Task.project_id == pid).execution_options(synchronize_session=False)
        )
        applications_result = await self.db.execute(
            delete(Application).where(Application.project_id == pid).execution_options(synchronize_session=False)
        )

        # members are loaded, so the association rows go with it
        await self.db.delete(project)

        if commit:
            await self.db.commit()

        counts = {
            "deleted_events": events_result.rowcount or 0,
            "deleted_tasks": tasks_result.rowcount or 0,
            "deleted_applications": applications_result.rowcount or 0,
        }
        logger.info(
            f"Project {pid} deleted: {counts['deleted_tasks']} tasks, "
            f"{counts['deleted_applications']} applications, {counts['deleted_events']} events",
            extra={"event_type": "project_cascade", "deleted_project_id": pid, **counts}
        )
        return counts
