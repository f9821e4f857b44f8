from sqlalchemy import Column, String, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, TimestampMixin


class Post(TimestampMixin, Base):
    """Social feed post"""
    __tablename__ = "posts"

    __table_args__ = (
        Index('ix_posts_created_at', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(200), nullable=False)
    content = Column(String(2000), nullable=False)
    created_by_id = Column(GUID, ForeignKey("users.id"), nullable=False)

    # Relationships
    creator = relationship("User")
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )

    def find_comment(self, comment_id: str):
        for comment in self.comments:
            if str(comment.id) == str(comment_id):
                return comment
        return None

    def __repr__(self):
        return f"<Post {self.title}>"


class Comment(TimestampMixin, Base):
    """Comment on a post; lives and dies with its post"""
    __tablename__ = "post_comments"

    __table_args__ = (
        Index('ix_post_comments_post_id', 'post_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    post_id = Column(GUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    content = Column(String(500), nullable=False)
    created_by_id = Column(GUID, ForeignKey("users.id"), nullable=False)

    # Relationships
    post = relationship("Post", back_populates="comments")
    creator = relationship("User")
