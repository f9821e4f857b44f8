from sqlalchemy import Column, String, Text, DateTime, Boolean, Enum as SQLEnum, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, TimestampMixin


class TaskStatus(str, enum.Enum):
    """Task status - transitions are not constrained"""
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(TimestampMixin, Base):
    """Unit of work scoped to a project, optionally linked to an application"""
    __tablename__ = "tasks"

    __table_args__ = (
        Index('ix_tasks_project_id', 'project_id'),
        Index('ix_tasks_created_by_id', 'created_by_id'),
        Index('ix_tasks_project_archived', 'project_id', 'is_archived'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    project_id = Column(GUID, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    application_id = Column(GUID, ForeignKey("applications.id", ondelete="SET NULL"), nullable=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, default="", nullable=False)
    status = Column(SQLEnum(TaskStatus), default=TaskStatus.NOT_STARTED, nullable=False)
    priority = Column(SQLEnum(TaskPriority), default=TaskPriority.MEDIUM, nullable=False)
    deadline = Column(DateTime, nullable=True)

    # Archived tasks stay queryable but drop out of "my tasks"
    is_archived = Column(Boolean, default=False, nullable=False)
    archived_at = Column(DateTime, nullable=True)

    created_by_id = Column(GUID, ForeignKey("users.id"), nullable=False)
    assignee_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    project = relationship("Project")
    application = relationship("Application")
    creator = relationship("User", foreign_keys=[created_by_id])
    assignee = relationship("User", foreign_keys=[assignee_id])

    @property
    def contributor_id(self) -> str:
        """Whom the task counts for in contribution stats: assignee, else creator"""
        return str(self.assignee_id or self.created_by_id)

    def __repr__(self):
        return f"<Task {self.name}>"
