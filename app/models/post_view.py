"""PostView model; one row per counted view event."""

from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from ..database import Base


class PostView(Base):
    __tablename__ = "post_views"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)

    viewed_at = Column(TIMESTAMP, nullable=False, server_default=func.now())

    # Request context, informational only
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)

    __table_args__ = (
        # Latest-view lookup per (post, user)
        Index("idx_post_view_post_user_viewed", "post_id", "user_id", "viewed_at"),
    )
