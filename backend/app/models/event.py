from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, TimestampMixin


class Event(TimestampMixin, Base):
    """Calendar entry, optionally tied to a project or task"""
    __tablename__ = "events"

    __table_args__ = (
        Index('ix_events_date', 'date'),
        Index('ix_events_project_id', 'project_id'),
        Index('ix_events_task_id', 'task_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(200), nullable=False)
    date = Column(DateTime, nullable=False)
    description = Column(Text, default="", nullable=False)
    send_alert = Column(Boolean, default=False, nullable=False)

    project_id = Column(GUID, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True)
    task_id = Column(GUID, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True)
    created_by_id = Column(GUID, ForeignKey("users.id"), nullable=False)

    # Relationships
    project = relationship("Project")
    task = relationship("Task")
    creator = relationship("User")

    def __repr__(self):
        return f"<Event {self.title} @ {self.date}>"
