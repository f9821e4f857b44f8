from sqlalchemy import Column, String, Boolean, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, TimestampMixin


class User(TimestampMixin, Base):
    """User model - identity, credential hash and admin flag"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(30), nullable=True)
    hashed_password = Column(String(255), nullable=False)

    is_admin = Column(Boolean, default=False, nullable=False)

    # URL or data URI
    profile_image = Column(Text, nullable=True)

    # Relationships
    created_projects = relationship("Project", back_populates="creator")

    def __repr__(self):
        return f"<User {self.email}>"
