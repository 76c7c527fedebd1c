"""Pydantic schemas for posts, filters and reactions."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from app.models.post import PostStatus
from app.schemas.base import CamelModel, Pagination
from app.utils.content import normalize_labels


def _validate_status_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return PostStatus.from_name(value).name


class PostFilter(CamelModel):
    """Optional listing filters. Labels are matched with AND semantics."""
    title: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    status: Optional[str] = None  # admin listing only

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("labels")
    @classmethod
    def clean_labels(cls, v: List[str]) -> List[str]:
        return normalize_labels(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        return _validate_status_name(v)

    def has_filters(self) -> bool:
        """Whether any filter is set."""
        return bool(self.title or self.status or self.labels)


# ----- Admin input -----

class PostCreate(CamelModel):
    """Schema for creating a new post."""
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    image: Optional[str] = ""
    reading_time: Optional[int] = Field(None, ge=0, description="Reading time in minutes")
    is_premium: bool = False
    status: str = PostStatus.DRAFT.name
    labels: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title must be a non-empty string.")
        return v.strip()

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content must be a non-empty string.")
        return v

    @field_validator("reading_time")
    @classmethod
    def zero_reading_time_is_unset(cls, v: Optional[int]) -> Optional[int]:
        return v or None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _validate_status_name(v)

    @field_validator("labels")
    @classmethod
    def clean_labels(cls, v: List[str]) -> List[str]:
        return normalize_labels(v)


# Sent as null, image and readingTime are cleared; these must carry a value
NON_NULLABLE_UPDATE_FIELDS = ("title", "content", "is_premium", "status", "labels")


class PostUpdate(CamelModel):
    """Schema for a partial post update. Only fields sent are applied."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None
    reading_time: Optional[int] = Field(None, ge=0)
    is_premium: Optional[bool] = None
    status: Optional[str] = None
    labels: Optional[List[str]] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "PostUpdate":
        for field in NON_NULLABLE_UPDATE_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null.")
        return self

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Title must be a non-empty string.")
        return v.strip() if v is not None else None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Content must be a non-empty string.")
        return v

    @field_validator("reading_time")
    @classmethod
    def zero_reading_time_is_unset(cls, v: Optional[int]) -> Optional[int]:
        return v or None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        return _validate_status_name(v)

    @field_validator("labels")
    @classmethod
    def clean_labels(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return normalize_labels(v) if v is not None else None


class PostStatusUpdate(CamelModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _validate_status_name(v)


# ----- Public output -----

class PostListItem(CamelModel):
    """Post summary for the public feed."""
    id: int
    image: Optional[str] = None
    title: str
    preview: str
    reading_time: Optional[int] = None
    created_on: Optional[datetime] = None
    is_premium: bool = False
    status: str
    reaction: Optional[int] = None  # 1 = like, 2 = dislike, None = no reaction / anonymous
    is_favorite: Optional[bool] = None  # None for anonymous requests
    number_of_likes: int = 0
    number_of_dislikes: int = 0
    number_of_comments: int = 0
    labels: List[str] = Field(default_factory=list)


class PostDetail(CamelModel):
    """Full post for the public detail view."""
    id: int
    image: Optional[str] = None
    title: str
    content: str
    preview: Optional[str] = None
    reading_time: Optional[int] = None
    created_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None
    is_premium: bool = False
    status: str
    reaction: Optional[int] = None
    is_favorite: Optional[bool] = None
    number_of_likes: int = 0
    number_of_dislikes: int = 0
    number_of_comments: int = 0
    labels: List[str] = Field(default_factory=list)


class PostListResponse(CamelModel):
    success: bool = True
    posts: List[PostListItem]
    pagination: Pagination
    filters: PostFilter
    favorite_only: bool = False


class PostDetailResponse(CamelModel):
    success: bool = True
    post: PostDetail
    content_restricted: bool = False


class ReactionResponse(CamelModel):
    """Response for like/dislike toggles."""
    success: bool = True
    reaction: Optional[int] = None
    likes: int
    dislikes: int


class FavoriteResponse(CamelModel):
    success: bool = True
    is_favorite: bool


class LabelListResponse(CamelModel):
    success: bool = True
    labels: List[str]


# ----- Admin output -----

class AdminPostListItem(CamelModel):
    id: int
    title: str
    created_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None
    status: str
    number_of_likes: int = 0
    number_of_dislikes: int = 0
    number_of_comments: int = 0
    number_of_views: int = 0
    labels: List[str] = Field(default_factory=list)


class AdminPostDetail(CamelModel):
    id: int
    image: Optional[str] = None
    title: str
    content: str
    preview: str
    reading_time: Optional[int] = None
    is_premium: bool = False
    status: str
    created_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None
    labels: List[str] = Field(default_factory=list)


class AdminPostListResponse(CamelModel):
    success: bool = True
    posts: List[AdminPostListItem]
    pagination: Pagination
    filters: PostFilter
    sort: str


class AdminPostDetailResponse(CamelModel):
    success: bool = True
    post: AdminPostDetail


class PostMutationResponse(CamelModel):
    success: bool = True
    message: str
    post: AdminPostDetail


class PostStatusResponse(CamelModel):
    success: bool = True
    id: int
    status: str
