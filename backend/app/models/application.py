from sqlalchemy import Column, String, Text, Enum as SQLEnum, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, TimestampMixin


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Application(TimestampMixin, Base):
    """Idea proposal submitted by a user against a project"""
    __tablename__ = "applications"

    __table_args__ = (
        Index('ix_applications_project_id', 'project_id'),
        Index('ix_applications_created_by_id', 'created_by_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    project_id = Column(GUID, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    idea = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(SQLEnum(ApplicationStatus), default=ApplicationStatus.PENDING, nullable=False)
    created_by_id = Column(GUID, ForeignKey("users.id"), nullable=False)

    # Relationships
    project = relationship("Project")
    creator = relationship("User")

    def __repr__(self):
        return f"<Application {self.idea} ({self.status.value if self.status else None})>"
