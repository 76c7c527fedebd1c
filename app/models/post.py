"""Post model for published content."""

from enum import IntEnum
from sqlalchemy import Column, Integer, Text, TIMESTAMP, Index, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class PostStatus(IntEnum):
    """Post lifecycle states, stored as integers."""
    DRAFT = 0
    PUBLISHED = 1
    ARCHIVED = 2

    @classmethod
    def from_name(cls, name: str) -> "PostStatus":
        """Parse a status name case-insensitively; raises ValueError on unknown names."""
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Status is required")
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(s.name for s in cls)
            raise ValueError(f"Invalid post status: {name}. Valid values are: {valid}") from None


class Post(Base):
    """Model for a content post."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)

    # Content
    image = Column(Text, nullable=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    preview = Column(Text, nullable=False, default="")
    reading_time = Column(Integer, nullable=True)  # minutes
    is_premium = Column(Boolean, nullable=False, default=False)
    status = Column(Integer, nullable=False, default=PostStatus.DRAFT.value, index=True)

    # Denormalized counters
    like_count = Column(Integer, nullable=False, default=0)
    dislike_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    # Bumped by content edits only, never by counter updates
    updated_at = Column(TIMESTAMP, server_default=func.now())

    __table_args__ = (
        Index("idx_post_status_created", "status", "created_at"),
        Index("idx_post_status_likes", "status", "like_count"),
        Index("idx_post_status_comments", "status", "comment_count"),
    )

    # Relationships
    comments = relationship(
        "PostComment",
        back_populates="post",
        order_by="PostComment.created_at.asc()",
    )
