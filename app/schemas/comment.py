"""Pydantic schemas for post comments."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.base import CamelModel, Pagination


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, description="Comment text")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment must be a non-empty string.")
        return v.strip()


class CommentResponse(CamelModel):
    id: int
    content: str
    created_on: Optional[datetime] = None
    user_first_name: Optional[str] = None
    user_last_name: Optional[str] = None
    user_avatar: Optional[str] = None


class CommentListResponse(CamelModel):
    success: bool = True
    comments: List[CommentResponse]
    pagination: Pagination


class CommentCreateResponse(CamelModel):
    success: bool = True
    comment: CommentResponse
    number_of_comments: int
