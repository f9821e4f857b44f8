from app.services.project_service import ProjectService
from app.services.application_service import ApplicationService
from app.services.task_service import TaskService
from app.services.report_service import ReportService
from app.services.assistant_service import AssistantService

__all__ = [
    "ProjectService",
    "ApplicationService",
    "TaskService",
    "ReportService",
    "AssistantService",
]
