"""PostComment model for comments on posts."""

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class PostComment(Base):
    """Model for a comment on a post. Append-only."""

    __tablename__ = "post_comments"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    content = Column(Text, nullable=False)

    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)

    __table_args__ = (
        Index("idx_post_comment_post", "post_id", "created_at"),
    )

    # Relationships
    post = relationship("Post", back_populates="comments")
    author = relationship("User", foreign_keys=[user_id])
