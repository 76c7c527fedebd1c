"""Pydantic schemas for local user profiles."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.base import CamelModel


class UserResponse(CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar: Optional[str] = None
    is_admin: bool = False
    created_on: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email or "",
            first_name=user.first_name,
            last_name=user.last_name,
            avatar=user.avatar,
            is_admin=bool(user.is_admin),
            created_on=user.created_at,
        )


class ProfileUpdate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    picture: Optional[str] = None


class ProfileResponse(CamelModel):
    success: bool = True
    user: UserResponse
