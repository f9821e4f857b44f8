"""
Application Service - idea proposals and the admin approve/reject workflow
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.models.application import Application, ApplicationStatus
from app.models.project import Project
from app.models.user import User
from app.schemas.application import ApplicationCreate
from app.services.project_service import ProjectService
from app.core.exceptions import ApplicationNotFoundError, ValidationError
from app.core.logging_config import logger


# Path action -> resulting status
DECISIONS = {
    "approve": ApplicationStatus.APPROVED,
    "reject": ApplicationStatus.REJECTED,
}


def application_load_options():
    return (
        selectinload(Application.project).selectinload(Project.members),
        selectinload(Application.creator),
    )


class ApplicationService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_application(self, application_id: str) -> Application:
        result = await self.db.execute(
            select(Application)
            .options(*application_load_options())
            .where(Application.id == str(application_id))
            .execution_options(populate_existing=True)
        )
        application = result.scalar_one_or_none()
        if not application:
            raise ApplicationNotFoundError(application_id)
        return application

    async def list_applications(self) -> List[Application]:
        result = await self.db.execute(
            select(Application)
            .options(*application_load_options())
            .order_by(Application.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_user_applications(self, user: User) -> List[Application]:
        result = await self.db.execute(
            select(Application)
            .options(*application_load_options())
            .where(Application.created_by_id == user.id)
            .order_by(Application.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_application(self, author: User, data: ApplicationCreate) -> Application:
        project = await ProjectService(self.db).get_project(data.project_id)

        application = Application(
            project_id=project.id,
            idea=data.idea,
            description=data.description,
            status=ApplicationStatus.PENDING,
            created_by_id=author.id,
        )
        self.db.add(application)
        await self.db.commit()

        logger.info(f"Application submitted for project {project.id} by {author.email}")
        return await self.get_application(application.id)

    async def decide(self, application_id: str, action: str) -> Application:
        """
        Approve or reject. Approval adds the author to the project's members
        unless already present; a full project rejects the approval and
        leaves the status unchanged. So does losing a race with a concurrent
        join by the same author (ALREADY_MEMBER).
        """
        status = DECISIONS.get(action)
        if status is None:
            raise ValidationError("Invalid action. Use 'approve' or 'reject'", field="action")

        application = await self.get_application(application_id)

        projects = ProjectService(self.db)
        project_id = application.project_id

        if status == ApplicationStatus.APPROVED:
            added = projects.add_member(application.project, application.creator)
            if added:
                logger.info(f"Approved application {application.id}: {application.creator.email} added to project {application.project_id}")

        application.status = status
        await projects.commit_membership(project_id)

        logger.info(f"Application {application.id} {status.value}")
        return await self.get_application(application_id)
