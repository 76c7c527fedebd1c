"""UserPostReaction model for likes and dislikes."""

from enum import IntEnum
from sqlalchemy import Column, Integer, ForeignKey, Index
from ..database import Base


class ReactionType(IntEnum):
    LIKE = 1
    DISLIKE = 2


class UserPostReaction(Base):
    """One row per (user, post); no row means no reaction."""

    __tablename__ = "user_post_reactions"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    reaction = Column(Integer, nullable=False)

    __table_args__ = (
        # Counter recomputation scans by post and reaction
        Index("idx_reaction_post_reaction", "post_id", "reaction"),
    )
