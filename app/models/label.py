"""Label and post-label association models."""

from sqlalchemy import Column, Integer, String, ForeignKey, Index
from ..database import Base


class Label(Base):
    """A free-form caption attached to posts."""

    __tablename__ = "labels"

    id = Column(Integer, primary_key=True, index=True)
    caption = Column(String(255), nullable=False, unique=True)


class PostLabel(Base):
    """Many-to-many join between posts and labels."""

    __tablename__ = "post_labels"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    label_id = Column(Integer, ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True)

    __table_args__ = (
        Index("idx_post_label_label", "label_id"),
    )
