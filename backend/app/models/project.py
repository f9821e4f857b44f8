from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, ForeignKey, Boolean, Index, Table
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, TimestampMixin


class ProjectType(str, enum.Enum):
    """Project categories"""
    PROJECT = "project"
    FEATURE = "feature"
    BUG_FIX = "bug/fix"
    OTHER = "other"
    TASK = "task"
    APPLICATION = "application"


MIN_CAPACITY = 1
MAX_CAPACITY = 100


project_members = Table(
    "project_members",
    Base.metadata,
    Column("project_id", GUID, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Project(TimestampMixin, Base):
    """Admin-owned collaborative workspace with a bounded member set"""
    __tablename__ = "projects"

    __table_args__ = (
        Index('ix_projects_created_by_id', 'created_by_id'),
        Index('ix_projects_created_at', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    type = Column(SQLEnum(ProjectType), default=ProjectType.PROJECT, nullable=False)

    # None means unlimited
    capacity = Column(Integer, nullable=True)
    deadline = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_by_id = Column(GUID, ForeignKey("users.id"), nullable=False)

    # Relationships
    creator = relationship("User", back_populates="created_projects")
    members = relationship("User", secondary=project_members, order_by="User.created_at")

    def has_member(self, user_id: str) -> bool:
        return any(str(member.id) == str(user_id) for member in self.members)

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and len(self.members) >= self.capacity

    def __repr__(self):
        return f"<Project {self.name}>"
