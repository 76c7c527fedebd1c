"""CRUD operations for PostComment."""

from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import PostNotFoundException
from app.crud.base import CRUDBase
from app.models.post import Post, PostStatus
from app.models.post_comment import PostComment


class CRUDPostComment(CRUDBase[PostComment, dict, dict]):
    """CRUD operations for PostComment."""

    def create_comment(
        self,
        db: Session,
        *,
        post_id: int,
        user_id: int,
        content: str,
    ) -> Tuple[PostComment, int]:
        """Add a comment and recount the post's comments in the same transaction.

        Returns:
            (comment, comment_count)
        """
        post = db.get(Post, post_id, with_for_update=True)
        if post is None or post.status != PostStatus.PUBLISHED.value:
            db.rollback()
            raise PostNotFoundException()

        try:
            comment = PostComment(post_id=post_id, user_id=user_id, content=content)
            db.add(comment)
            db.flush()

            comment_count = self.get_total_count(db, post_id=post_id)
            post.comment_count = comment_count
            db.add(post)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(comment)
        return comment, comment_count

    def get_by_post(
        self,
        db: Session,
        *,
        post_id: int,
        skip: int = 0,
        limit: int = 100,
    ) -> List[PostComment]:
        """Comments for a post, oldest first, with authors loaded."""
        stmt = (
            select(PostComment)
            .options(joinedload(PostComment.author))
            .where(PostComment.post_id == post_id)
            .order_by(PostComment.created_at.asc(), PostComment.id.asc())
            .offset(skip)
            .limit(limit)
        )
        return list(db.scalars(stmt).all())

    def get_total_count(self, db: Session, *, post_id: int) -> int:
        return self.count(db, PostComment.post_id == post_id)


# Singleton instance
crud_post_comment = CRUDPostComment(PostComment)
