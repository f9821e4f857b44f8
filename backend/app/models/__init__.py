# Re-export all models for convenient imports
from app.models.user import User
from app.models.project import Project, ProjectType, project_members
from app.models.application import Application, ApplicationStatus
from app.models.task import Task, TaskStatus, TaskPriority
from app.models.event import Event
from app.models.post import Post, Comment
from app.models.repository_link import RepositoryLink

__all__ = [
    # User
    "User",
    # Project
    "Project",
    "ProjectType",
    "project_members",
    # Applications
    "Application",
    "ApplicationStatus",
    # Tasks
    "Task",
    "TaskStatus",
    "TaskPriority",
    # Calendar
    "Event",
    # Feed
    "Post",
    "Comment",
    # Repository links
    "RepositoryLink",
]
