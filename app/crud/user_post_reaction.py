"""CRUD operations for UserPostReaction (likes and dislikes)."""

from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import PostNotFoundException
from app.crud.base import CRUDBase
from app.models.post import Post, PostStatus
from app.models.user_post_reaction import ReactionType, UserPostReaction


class CRUDUserPostReaction(CRUDBase[UserPostReaction, dict, dict]):
    """CRUD operations for UserPostReaction."""

    def get_reaction(self, db: Session, *, user_id: int, post_id: int) -> Optional[int]:
        row = db.get(UserPostReaction, {"user_id": user_id, "post_id": post_id})
        return row.reaction if row else None

    def count_reactions(self, db: Session, *, post_id: int, reaction: ReactionType) -> int:
        return self.count(
            db,
            UserPostReaction.post_id == post_id,
            UserPostReaction.reaction == reaction.value,
        )

    def set_reaction(
        self,
        db: Session,
        *,
        user_id: int,
        post_id: int,
        reaction: ReactionType,
    ) -> Tuple[Optional[int], int, int]:
        """
        Apply a like/dislike and refresh the post's counters.

        Repeating the current reaction removes it; a different reaction replaces it.
        The post row is locked for the duration so concurrent toggles on the same
        post serialize.

        Returns:
            (reaction: int | None, like_count: int, dislike_count: int)
        """
        post = db.get(Post, post_id, with_for_update=True)
        if post is None or post.status != PostStatus.PUBLISHED.value:
            db.rollback()
            raise PostNotFoundException()

        try:
            existing = db.get(UserPostReaction, {"user_id": user_id, "post_id": post_id})

            if existing is None:
                db.add(UserPostReaction(user_id=user_id, post_id=post_id, reaction=reaction.value))
                final_reaction: Optional[int] = reaction.value
            elif existing.reaction == reaction.value:
                # Same reaction again: toggle off
                db.delete(existing)
                final_reaction = None
            else:
                existing.reaction = reaction.value
                db.add(existing)
                final_reaction = reaction.value

            db.flush()

            like_count = self.count_reactions(db, post_id=post_id, reaction=ReactionType.LIKE)
            dislike_count = self.count_reactions(db, post_id=post_id, reaction=ReactionType.DISLIKE)
            post.like_count = like_count
            post.dislike_count = dislike_count
            db.add(post)
            db.commit()
        except Exception:
            db.rollback()
            raise

        return final_reaction, like_count, dislike_count


# Singleton instance
crud_user_post_reaction = CRUDUserPostReaction(UserPostReaction)
