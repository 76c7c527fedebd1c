"""View tracking for posts."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.crud.base import CRUDBase
from app.models.post import Post
from app.models.post_view import PostView

logger = logging.getLogger(__name__)


class CRUDPostView(CRUDBase[PostView, dict, dict]):
    """Records at most one counted view per (user, post) per cool-down window."""

    def get_last_viewed_at(self, db: Session, *, post_id: int, user_id: int) -> Optional[datetime]:
        stmt = (
            select(PostView.viewed_at)
            .where(PostView.post_id == post_id, PostView.user_id == user_id)
            .order_by(PostView.viewed_at.desc())
            .limit(1)
        )
        return db.scalar(stmt)

    def count_views(self, db: Session, *, post_id: int) -> int:
        return self.count(db, PostView.post_id == post_id)

    def track_view(
        self,
        db: Session,
        *,
        post_id: int,
        user_id: int,
        now: Optional[datetime] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> bool:
        """
        Record a view unless the user viewed the post within its reading time.

        The cool-down is the post's reading time in minutes, or
        DEFAULT_READING_TIME_MINUTES when unset. Failures are logged and
        reported as False; they never propagate to the caller.

        Returns:
            bool: True if a view was recorded
        """
        now = now or datetime.utcnow()
        try:
            post = db.get(Post, post_id, with_for_update=True)
            if post is None:
                db.rollback()
                return False

            cooldown = timedelta(minutes=post.reading_time or settings.DEFAULT_READING_TIME_MINUTES)
            last_viewed_at = self.get_last_viewed_at(db, post_id=post_id, user_id=user_id)
            if last_viewed_at is not None and now - last_viewed_at < cooldown:
                db.rollback()
                return False

            db.add(PostView(
                post_id=post_id,
                user_id=user_id,
                viewed_at=now,
                ip_address=ip_address[:45] if ip_address else None,
                user_agent=user_agent[:500] if user_agent else None,
            ))
            db.flush()

            post.view_count = self.count_views(db, post_id=post_id)
            db.add(post)
            db.commit()
            return True
        except Exception:
            db.rollback()
            logger.exception(f"Failed to track view for post {post_id}, user {user_id}")
            return False


# Singleton instance
crud_post_view = CRUDPostView(PostView)
