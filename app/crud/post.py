"""CRUD operations and listing queries for Post."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, and_, desc, null, select
from sqlalchemy.orm import Session

from app.config import settings
from app.crud.base import CRUDBase
from app.crud.label import crud_label
from app.models.favorite_post import FavoritePost
from app.models.label import Label, PostLabel
from app.models.post import Post, PostStatus
from app.models.user_post_reaction import UserPostReaction
from app.schemas.post import (
    AdminPostDetail,
    AdminPostListItem,
    PostCreate,
    PostDetail,
    PostFilter,
    PostListItem,
    PostUpdate,
)
from app.utils.content import truncate_content

# Admin sort options -> column, always descending
POST_SORT_COLUMNS = {
    "date": Post.updated_at,
    "likes": Post.like_count,
    "comments": Post.comment_count,
    "views": Post.view_count,
}
DEFAULT_POST_SORT = "date"


def get_status_name(value: Optional[int]) -> str:
    """Map a stored status integer to its name; missing values read as DRAFT."""
    if value is None:
        return PostStatus.DRAFT.name
    return PostStatus(value).name


class CRUDPost(CRUDBase[Post, PostCreate, PostUpdate]):
    """CRUD operations for Post."""

    # ----- Admin writes -----
    def create_post(self, db: Session, *, post_in: PostCreate) -> Post:
        """Create a post and attach its labels in one transaction."""
        now = datetime.utcnow()
        post = Post(
            image=post_in.image or "",
            title=post_in.title,
            content=post_in.content,
            preview=truncate_content(post_in.content, settings.PREVIEW_MAX_LENGTH),
            reading_time=post_in.reading_time,
            is_premium=post_in.is_premium,
            status=PostStatus[post_in.status].value,
            created_at=now,
            updated_at=now,
            like_count=0,
            dislike_count=0,
            comment_count=0,
            view_count=0,
        )
        try:
            db.add(post)
            db.flush()
            if post_in.labels:
                crud_label.add_post_labels(db, post_id=post.id, captions=post_in.labels)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(post)
        return post

    def update_post(self, db: Session, *, post: Post, post_in: PostUpdate) -> Post:
        """Apply the fields that were sent; labels, when sent, replace the current set."""
        update_data = post_in.model_dump(exclude_unset=True)
        labels = update_data.pop("labels", None)

        try:
            for field, value in update_data.items():
                if field == "status":
                    post.status = PostStatus[value].value
                elif field == "image":
                    post.image = value or ""
                elif field == "is_premium":
                    post.is_premium = bool(value)
                else:
                    setattr(post, field, value)
            if "content" in update_data:
                post.preview = truncate_content(post.content, settings.PREVIEW_MAX_LENGTH)
            post.updated_at = datetime.utcnow()
            db.add(post)
            if labels is not None:
                crud_label.sync_post_labels(db, post_id=post.id, captions=labels)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(post)
        return post

    def update_status(self, db: Session, *, post_id: int, status: PostStatus) -> Optional[Post]:
        """Set the status of a post. Returns None when the post does not exist."""
        post = self.get(db, post_id)
        if post is None:
            return None
        post.status = status.value
        post.updated_at = datetime.utcnow()
        db.add(post)
        self.commit(db, post)
        return post

    # ----- Lookups -----
    def get_published(self, db: Session, post_id: int) -> Optional[Post]:
        stmt = select(Post).where(Post.id == post_id, Post.status == PostStatus.PUBLISHED.value)
        return db.scalars(stmt).first()

    # ----- Query composition -----
    def _user_columns(self, user_id: Optional[int]) -> List[Any]:
        """Per-user reaction and favorite flag as correlated subqueries (NULL when anonymous)."""
        if not user_id:
            return [null().label("reaction"), null().label("is_favorite")]

        reaction = (
            select(UserPostReaction.reaction)
            .where(UserPostReaction.post_id == Post.id, UserPostReaction.user_id == user_id)
            .scalar_subquery()
            .label("reaction")
        )
        is_favorite = (
            select(FavoritePost.post_id)
            .where(FavoritePost.post_id == Post.id, FavoritePost.user_id == user_id)
            .exists()
            .label("is_favorite")
        )
        return [reaction, is_favorite]

    def _apply_filter(self, stmt: Select, post_filter: Optional[PostFilter], *, include_status: bool) -> Select:
        if post_filter is None or not post_filter.has_filters():
            return stmt

        if post_filter.title:
            pattern = (
                post_filter.title.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            )
            stmt = stmt.where(Post.title.ilike(f"{pattern}%", escape="\\"))

        if include_status and post_filter.status:
            stmt = stmt.where(Post.status == PostStatus[post_filter.status].value)

        # One EXISTS per label: the post must carry every label
        for caption in post_filter.labels:
            has_label = (
                select(PostLabel.post_id)
                .join(Label, Label.id == PostLabel.label_id)
                .where(and_(PostLabel.post_id == Post.id, Label.caption == caption))
                .exists()
            )
            stmt = stmt.where(has_label)

        return stmt

    def get_public_list(
        self,
        db: Session,
        *,
        user_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
        post_filter: Optional[PostFilter] = None,
        favorite_only: bool = False,
    ) -> List[PostListItem]:
        """Published posts, newest first, with per-user flags and labels."""
        stmt = select(Post, *self._user_columns(user_id)).where(
            Post.status == PostStatus.PUBLISHED.value
        )

        if favorite_only and user_id:
            stmt = stmt.where(
                select(FavoritePost.post_id)
                .where(FavoritePost.post_id == Post.id, FavoritePost.user_id == user_id)
                .exists()
            )

        stmt = self._apply_filter(stmt, post_filter, include_status=False)
        stmt = stmt.order_by(desc(Post.created_at), desc(Post.id)).limit(limit).offset(offset)

        rows = db.execute(stmt).all()
        labels = crud_label.get_captions_by_post(db, [post.id for post, _, _ in rows])

        return [
            PostListItem(
                id=post.id,
                image=post.image,
                title=post.title,
                preview=post.preview,
                reading_time=post.reading_time,
                created_on=post.created_at,
                is_premium=bool(post.is_premium),
                status=get_status_name(post.status),
                reaction=reaction,
                is_favorite=None if is_favorite is None else bool(is_favorite),
                number_of_likes=post.like_count or 0,
                number_of_dislikes=post.dislike_count or 0,
                number_of_comments=post.comment_count or 0,
                labels=labels.get(post.id, []),
            )
            for post, reaction, is_favorite in rows
        ]

    def get_public_detail(
        self,
        db: Session,
        *,
        post_id: int,
        user_id: Optional[int] = None,
    ) -> Optional[PostDetail]:
        """A single published post with full content, or None."""
        stmt = select(Post, *self._user_columns(user_id)).where(
            Post.id == post_id, Post.status == PostStatus.PUBLISHED.value
        )
        row = db.execute(stmt).first()
        if row is None:
            return None

        post, reaction, is_favorite = row
        return PostDetail(
            id=post.id,
            image=post.image,
            title=post.title,
            content=post.content,
            preview=post.preview,
            reading_time=post.reading_time,
            created_on=post.created_at,
            updated_on=post.updated_at,
            is_premium=bool(post.is_premium),
            status=get_status_name(post.status),
            reaction=reaction,
            is_favorite=None if is_favorite is None else bool(is_favorite),
            number_of_likes=post.like_count or 0,
            number_of_dislikes=post.dislike_count or 0,
            number_of_comments=post.comment_count or 0,
            labels=crud_label.get_captions_for_post(db, post.id),
        )

    def get_admin_list(
        self,
        db: Session,
        *,
        limit: int = 50,
        offset: int = 0,
        sort: str = DEFAULT_POST_SORT,
        post_filter: Optional[PostFilter] = None,
    ) -> List[AdminPostListItem]:
        """Posts of any status, sorted descending by the chosen column."""
        sort_column = POST_SORT_COLUMNS.get(sort, POST_SORT_COLUMNS[DEFAULT_POST_SORT])

        stmt = select(Post)
        stmt = self._apply_filter(stmt, post_filter, include_status=True)
        stmt = stmt.order_by(desc(sort_column), desc(Post.id)).limit(limit).offset(offset)

        posts = list(db.scalars(stmt).all())
        labels = crud_label.get_captions_by_post(db, [post.id for post in posts])

        return [
            AdminPostListItem(
                id=post.id,
                title=post.title,
                created_on=post.created_at,
                updated_on=post.updated_at,
                status=get_status_name(post.status),
                number_of_likes=post.like_count or 0,
                number_of_dislikes=post.dislike_count or 0,
                number_of_comments=post.comment_count or 0,
                number_of_views=post.view_count or 0,
                labels=labels.get(post.id, []),
            )
            for post in posts
        ]

    def to_admin_detail(self, db: Session, post: Post) -> AdminPostDetail:
        return AdminPostDetail(
            id=post.id,
            image=post.image,
            title=post.title,
            content=post.content,
            preview=post.preview,
            reading_time=post.reading_time,
            is_premium=bool(post.is_premium),
            status=get_status_name(post.status),
            created_on=post.created_at,
            updated_on=post.updated_at,
            labels=crud_label.get_captions_for_post(db, post.id),
        )

    def get_admin_detail(self, db: Session, *, post_id: int) -> Optional[AdminPostDetail]:
        post = self.get(db, post_id)
        if post is None:
            return None
        return self.to_admin_detail(db, post)

    def get_top_posts(self, db: Session, *, by: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Published posts with the highest like or comment counter."""
        column = {"likes": Post.like_count, "comments": Post.comment_count}[by]
        stmt = (
            select(Post.id, Post.title, column)
            .where(Post.status == PostStatus.PUBLISHED.value)
            .order_by(desc(column), desc(Post.id))
            .limit(limit)
        )
        return [
            {"id": post_id, "title": title, "count": count or 0}
            for post_id, title, count in db.execute(stmt).all()
        ]


# Singleton instance
crud_post = CRUDPost(Post)
