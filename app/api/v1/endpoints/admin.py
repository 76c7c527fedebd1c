"""Admin endpoints: post management and the metrics dashboard."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_admin
from app.core.exceptions import InvalidQueryException, PostNotFoundException
from app.crud.post import DEFAULT_POST_SORT, POST_SORT_COLUMNS, crud_post, get_status_name
from app.models.post import PostStatus
from app.schemas.base import Pagination
from app.schemas.metrics import MetricsResponse
from app.schemas.post import (
    AdminPostDetailResponse,
    AdminPostListResponse,
    PostCreate,
    PostFilter,
    PostMutationResponse,
    PostStatusResponse,
    PostStatusUpdate,
    PostUpdate,
)
from app.services.metrics_service import metrics_service
from app.utils.content import parse_label_query

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


@router.get(
    "/posts",
    response_model=AdminPostListResponse,
    status_code=status.HTTP_200_OK,
    summary="List posts (admin)",
    description="""
    Get posts of every status with view counts.

    **Sort:** `date` (last update), `likes`, `comments`, `views`; always descending.

    **Access:** Admin only
    """,
)
def list_posts(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    sort: str = Query(DEFAULT_POST_SORT, description="date | likes | comments | views"),
    title: Optional[str] = Query(None, max_length=500),
    status_filter: Optional[str] = Query(None, alias="status", description="DRAFT | PUBLISHED | ARCHIVED"),
    labels: Optional[str] = Query(None, description="Comma-separated labels"),
    db: Session = Depends(get_db),
) -> AdminPostListResponse:
    if sort not in POST_SORT_COLUMNS:
        raise InvalidQueryException(
            f"Invalid sort '{sort}'. Allowed: {', '.join(POST_SORT_COLUMNS)}"
        )

    try:
        post_filter = PostFilter(title=title, status=status_filter, labels=parse_label_query(labels))
    except ValueError as e:
        raise InvalidQueryException(f"Invalid status '{status_filter}'") from e

    posts = crud_post.get_admin_list(
        db, limit=limit, offset=offset, sort=sort, post_filter=post_filter
    )
    return AdminPostListResponse(
        posts=posts,
        pagination=Pagination(limit=limit, offset=offset, count=len(posts)),
        filters=post_filter,
        sort=sort,
    )


@router.get(
    "/posts/{post_id}",
    response_model=AdminPostDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post (admin)",
)
def get_post(
    post_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> AdminPostDetailResponse:
    post = crud_post.get_admin_detail(db, post_id=post_id)
    if post is None:
        raise PostNotFoundException()
    return AdminPostDetailResponse(post=post)


@router.post(
    "/posts",
    response_model=PostMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="""
    Create a post. The preview is derived from the content; unknown labels
    are created on the fly.

    **Access:** Admin only
    """,
)
def create_post(
    post_in: PostCreate,
    db: Session = Depends(get_db),
) -> PostMutationResponse:
    post = crud_post.create_post(db, post_in=post_in)
    logger.info(f"Post {post.id} created with status {get_status_name(post.status)}")
    return PostMutationResponse(
        message="Post created successfully",
        post=crud_post.to_admin_detail(db, post),
    )


@router.put(
    "/posts/{post_id}",
    response_model=PostMutationResponse,
    status_code=status.HTTP_200_OK,
    summary="Update post",
    description="""
    Partially update a post. Only the fields sent are changed; sending
    `labels` replaces the post's labels.

    **Access:** Admin only
    """,
)
def update_post(
    post_in: PostUpdate,
    post_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> PostMutationResponse:
    if not post_in.model_dump(exclude_unset=True):
        raise InvalidQueryException("At least one field must be provided for update.")

    post = crud_post.get(db, post_id)
    if post is None:
        raise PostNotFoundException()

    post = crud_post.update_post(db, post=post, post_in=post_in)
    logger.info(f"Post {post.id} updated")
    return PostMutationResponse(
        message="Post updated successfully",
        post=crud_post.to_admin_detail(db, post),
    )


@router.patch(
    "/posts/{post_id}/status",
    response_model=PostStatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Change post status",
)
def update_post_status(
    status_in: PostStatusUpdate,
    post_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> PostStatusResponse:
    post = crud_post.update_status(
        db, post_id=post_id, status=PostStatus.from_name(status_in.status)
    )
    if post is None:
        raise PostNotFoundException()
    logger.info(f"Post {post.id} status set to {status_in.status}")
    return PostStatusResponse(id=post.id, status=get_status_name(post.status))


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    status_code=status.HTTP_200_OK,
    summary="Dashboard metrics",
    description="""
    Aggregated user, post and subscription metrics.

    Served from a cache refreshed at most every few minutes; a failed
    refresh returns zeroed metrics.

    **Access:** Admin only
    """,
)
async def get_metrics() -> MetricsResponse:
    return await metrics_service.get_metrics()
