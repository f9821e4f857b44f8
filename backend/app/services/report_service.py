"""
Report Generation Service
Builds the project closure report: task statistics, per-member contribution
and a PDF rendering returned as a data URI
"""

import asyncio
import base64
from typing import Dict, Any, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.models.project import Project
from app.models.task import Task, TaskStatus
from app.services.project_service import ProjectService
from app.utils.document_generator import document_generator
from app.core.exceptions import ReportGenerationError
from app.core.logging_config import logger
from app.core.types import utcnow


def _display_name(user) -> str:
    return f"{user.name} {user.lastname}".strip()


def compute_task_stats(tasks: List[Task]) -> Dict[str, Any]:
    """Aggregate counts; completion rate is a percentage with one decimal"""
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    in_progress = sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS)
    not_started = sum(1 for t in tasks if t.status == TaskStatus.NOT_STARTED)
    rate = f"{(completed / total * 100):.1f}" if total else "0.0"
    return {
        "total_tasks": total,
        "completed_tasks": completed,
        "in_progress_tasks": in_progress,
        "not_started_tasks": not_started,
        "completion_rate": rate,
    }


def compute_member_stats(project: Project, tasks: List[Task]) -> List[Dict[str, Any]]:
    """Tasks count for their assignee when one is set, otherwise for their creator"""
    stats = []
    for member in project.members:
        member_tasks = [t for t in tasks if t.contributor_id == str(member.id)]
        stats.append({
            "id": member.id,
            "name": _display_name(member),
            "email": member.email,
            "tasks": len(member_tasks),
            "completed": sum(1 for t in member_tasks if t.status == TaskStatus.COMPLETED),
        })
    return stats


class ReportService:
    """Service for generating project reports"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def generate_project_report(self, project_id: str) -> Tuple[str, Dict[str, Any]]:
        """
        Render the report for a project.

        Returns:
            (``data:application/pdf;base64,...`` string, summary dict)
        """
        project = await ProjectService(self.db).get_project(project_id)

        result = await self.db.execute(
            select(Task)
            .options(selectinload(Task.creator), selectinload(Task.assignee))
            .where(Task.project_id == project.id)
            .order_by(Task.created_at)
        )
        tasks = list(result.scalars().all())

        stats = compute_task_stats(tasks)
        members = compute_member_stats(project, tasks)

        # Plain data only: the PDF is rendered off the event loop
        report = {
            "generated_at": utcnow(),
            "project": {
                "name": project.name,
                "description": project.description,
                "type": project.type.value,
                "creator": _display_name(project.creator) if project.creator else "Unknown",
                "created_at": project.created_at,
                "deadline": project.deadline,
                "member_count": len(project.members),
            },
            "stats": stats,
            "members": members,
            "tasks": [
                {
                    "name": t.name,
                    "status": t.status.value,
                    "priority": t.priority.value,
                    "deadline": t.deadline,
                }
                for t in tasks
            ],
        }

        try:
            pdf_bytes = await asyncio.to_thread(document_generator.generate_project_report_pdf, report)
        except Exception as e:
            logger.log_error_with_context(e, context="project_report", report_project_id=project.id)
            raise ReportGenerationError(project_id=project.id) from e

        pdf_url = "data:application/pdf;base64," + base64.b64encode(pdf_bytes).decode("ascii")

        summary = {
            "project_id": project.id,
            "project_name": project.name,
            **stats,
            "members": members,
        }
        logger.info(
            f"Report generated for project {project.id}: {stats['total_tasks']} tasks, "
            f"{stats['completion_rate']}% complete"
        )
        return pdf_url, summary
