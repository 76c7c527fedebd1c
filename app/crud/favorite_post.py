"""CRUD operations for FavoritePost."""

from sqlalchemy.orm import Session

from app.core.exceptions import PostNotFoundException
from app.crud.base import CRUDBase
from app.crud.post import crud_post
from app.models.favorite_post import FavoritePost


class CRUDFavoritePost(CRUDBase[FavoritePost, dict, dict]):
    """Idempotent favorite add/remove. No counters are kept for favorites."""

    def is_favorite(self, db: Session, *, user_id: int, post_id: int) -> bool:
        return db.get(FavoritePost, {"user_id": user_id, "post_id": post_id}) is not None

    def add_favorite(self, db: Session, *, user_id: int, post_id: int) -> bool:
        """Favorite a post; already-favorited is not an error. Returns the resulting state."""
        if crud_post.get_published(db, post_id) is None:
            raise PostNotFoundException()

        if not self.is_favorite(db, user_id=user_id, post_id=post_id):
            db.add(FavoritePost(user_id=user_id, post_id=post_id))
            self.commit(db)
        return True

    def remove_favorite(self, db: Session, *, user_id: int, post_id: int) -> bool:
        """Unfavorite a post; not-favorited is not an error. Returns the resulting state."""
        if crud_post.get_published(db, post_id) is None:
            raise PostNotFoundException()

        favorite = db.get(FavoritePost, {"user_id": user_id, "post_id": post_id})
        if favorite is not None:
            db.delete(favorite)
            self.commit(db)
        return False


# Singleton instance
crud_favorite_post = CRUDFavoritePost(FavoritePost)
