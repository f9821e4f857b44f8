from sqlalchemy import Column, String, ForeignKey, Table
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, TimestampMixin


repository_link_members = Table(
    "repository_link_members",
    Base.metadata,
    Column("link_id", GUID, ForeignKey("repository_links.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class RepositoryLink(TimestampMixin, Base):
    """Shared GitHub repository URL"""
    __tablename__ = "repository_links"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    url = Column(String(200), nullable=False)
    created_by_id = Column(GUID, ForeignKey("users.id"), nullable=False)

    creator = relationship("User")
    members = relationship("User", secondary=repository_link_members)

    def __repr__(self):
        return f"<RepositoryLink {self.url}>"
