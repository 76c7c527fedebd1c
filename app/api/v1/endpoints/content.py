"""Public content endpoints: post feed, post detail, reactions, favorites, comments."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import (
    get_current_user,
    get_db,
    get_optional_token_payload,
    get_optional_user_id,
)
from app.core.exceptions import PostNotFoundException
from app.core.security import is_admin_payload
from app.crud.favorite_post import crud_favorite_post
from app.crud.label import crud_label
from app.crud.post import crud_post
from app.crud.post_comment import crud_post_comment
from app.crud.post_view import crud_post_view
from app.crud.user_post_reaction import crud_user_post_reaction
from app.models.post_comment import PostComment
from app.models.user import User
from app.models.user_post_reaction import ReactionType
from app.schemas.base import Pagination
from app.schemas.comment import (
    CommentCreate,
    CommentCreateResponse,
    CommentListResponse,
    CommentResponse,
)
from app.schemas.post import (
    FavoriteResponse,
    LabelListResponse,
    PostDetailResponse,
    PostFilter,
    PostListResponse,
    ReactionResponse,
)
from app.services.subscription_service import subscription_service
from app.utils.content import parse_label_query

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/content",
    tags=["Content"],
)


def _has_premium_access(
    db: Session,
    payload: Optional[Dict[str, Any]],
    user_id: Optional[int],
) -> bool:
    """Admins and users with an active subscription can read premium content."""
    if is_admin_payload(payload):
        return True
    if not user_id:
        return False
    try:
        return subscription_service.has_active_subscription(db, user_id)
    except SQLAlchemyError as e:
        # Fall back to the preview rather than failing the read
        db.rollback()
        logger.warning(f"Error checking subscription status for user {user_id}: {e}")
        return False


def _comment_response(comment: PostComment) -> CommentResponse:
    author = comment.author
    return CommentResponse(
        id=comment.id,
        content=comment.content,
        created_on=comment.created_at,
        user_first_name=author.first_name if author else None,
        user_last_name=author.last_name if author else None,
        user_avatar=author.avatar if author else None,
    )


@router.get(
    "/posts",
    response_model=PostListResponse,
    status_code=status.HTTP_200_OK,
    summary="List published posts",
    description="""
    Get published posts, newest first.

    **Filters:**
    - `title`: case-insensitive "starts with" match
    - `labels`: comma-separated; a post must carry every listed label
    - `favoriteOnly`: only the caller's favorites (ignored for anonymous requests)

    `pagination.count == limit` means another page may exist.

    **Access:** Public; a bearer token adds the caller's reaction and favorite flags
    """,
)
def list_posts(
    limit: int = Query(50, ge=1, le=100, description="Maximum number of posts to return"),
    offset: int = Query(0, ge=0, description="Number of posts to skip"),
    title: Optional[str] = Query(None, max_length=500, description="Title prefix"),
    labels: Optional[str] = Query(None, description="Comma-separated labels"),
    favorite_only: bool = Query(False, alias="favoriteOnly"),
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
) -> PostListResponse:
    """List published posts."""
    post_filter = PostFilter(title=title, labels=parse_label_query(labels))
    favorite_only = bool(favorite_only and user_id)

    posts = crud_post.get_public_list(
        db,
        user_id=user_id,
        limit=limit,
        offset=offset,
        post_filter=post_filter,
        favorite_only=favorite_only,
    )

    return PostListResponse(
        posts=posts,
        pagination=Pagination(limit=limit, offset=offset, count=len(posts)),
        filters=post_filter,
        favorite_only=favorite_only,
    )


@router.get(
    "/posts/{post_id}",
    response_model=PostDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post detail",
    description="""
    Get a published post with full content.

    Premium content is replaced by its preview (and `contentRestricted` set)
    unless the caller is an admin or has an active subscription. Views are
    counted for known users, at most once per reading time.

    **Access:** Public
    """,
)
def get_post(
    request: Request,
    post_id: int = Path(..., gt=0),
    payload: Optional[Dict[str, Any]] = Depends(get_optional_token_payload),
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
) -> PostDetailResponse:
    """Get post detail."""
    post = crud_post.get_public_detail(db, post_id=post_id, user_id=user_id)
    if post is None:
        raise PostNotFoundException()

    content_restricted = False
    if post.is_premium and not _has_premium_access(db, payload, user_id):
        post.content = post.preview or ""
        content_restricted = True
    post.preview = None

    if user_id:
        crud_post_view.track_view(
            db,
            post_id=post.id,
            user_id=user_id,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )

    return PostDetailResponse(post=post, content_restricted=content_restricted)


def _react(db: Session, post_id: int, user_id: int, reaction: ReactionType) -> ReactionResponse:
    final_reaction, likes, dislikes = crud_user_post_reaction.set_reaction(
        db, user_id=user_id, post_id=post_id, reaction=reaction
    )
    return ReactionResponse(reaction=final_reaction, likes=likes, dislikes=dislikes)


@router.post(
    "/posts/{post_id}/like",
    response_model=ReactionResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle like on post",
    description="""
    Like a post. Liking an already-liked post removes the like; liking a
    disliked post replaces the dislike.

    **Access:** All authenticated users
    """,
)
def like_post(
    post_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReactionResponse:
    return _react(db, post_id, current_user.id, ReactionType.LIKE)


@router.post(
    "/posts/{post_id}/dislike",
    response_model=ReactionResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle dislike on post",
    description="""
    Dislike a post, with the same toggle rules as like.

    **Access:** All authenticated users
    """,
)
def dislike_post(
    post_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReactionResponse:
    return _react(db, post_id, current_user.id, ReactionType.DISLIKE)


@router.post(
    "/posts/{post_id}/favorite",
    response_model=FavoriteResponse,
    status_code=status.HTTP_200_OK,
    summary="Add post to favorites",
)
def favorite_post(
    post_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FavoriteResponse:
    is_favorite = crud_favorite_post.add_favorite(db, user_id=current_user.id, post_id=post_id)
    return FavoriteResponse(is_favorite=is_favorite)


@router.post(
    "/posts/{post_id}/unfavorite",
    response_model=FavoriteResponse,
    status_code=status.HTTP_200_OK,
    summary="Remove post from favorites",
)
def unfavorite_post(
    post_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FavoriteResponse:
    is_favorite = crud_favorite_post.remove_favorite(db, user_id=current_user.id, post_id=post_id)
    return FavoriteResponse(is_favorite=is_favorite)


@router.get(
    "/posts/{post_id}/comments",
    response_model=CommentListResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post comments",
    description="""
    Get comments for a published post, oldest first.

    **Access:** Public
    """,
)
def list_comments(
    post_id: int = Path(..., gt=0),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> CommentListResponse:
    if crud_post.get_published(db, post_id) is None:
        raise PostNotFoundException()

    comments = crud_post_comment.get_by_post(db, post_id=post_id, skip=offset, limit=limit)
    return CommentListResponse(
        comments=[_comment_response(comment) for comment in comments],
        pagination=Pagination(limit=limit, offset=offset, count=len(comments)),
    )


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on post",
    description="""
    Add a comment to a published post.

    **Access:** All authenticated users
    """,
)
def create_comment(
    comment_in: CommentCreate,
    post_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CommentCreateResponse:
    comment, comment_count = crud_post_comment.create_comment(
        db,
        post_id=post_id,
        user_id=current_user.id,
        content=comment_in.content,
    )
    return CommentCreateResponse(
        comment=_comment_response(comment),
        number_of_comments=comment_count,
    )


@router.get(
    "/labels",
    response_model=LabelListResponse,
    status_code=status.HTTP_200_OK,
    summary="List labels",
)
def list_labels(db: Session = Depends(get_db)) -> LabelListResponse:
    return LabelListResponse(labels=crud_label.get_all_captions(db))
