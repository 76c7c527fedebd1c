"""Profile endpoints for the authenticated user."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.crud.user import crud_user
from app.models.user import User
from app.schemas.user import ProfileResponse, ProfileUpdate, UserResponse

router = APIRouter(
    prefix="/profile",
    tags=["Profile"],
)


@router.get(
    "/me",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get my profile",
    description="""
    Get the local profile of the caller. The profile is created from the
    token claims on first access.

    **Access:** All authenticated users
    """,
)
def get_my_profile(current_user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse(user=UserResponse.from_user(current_user))


@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Update my profile",
)
def update_my_profile(
    profile_in: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    user = crud_user.update_profile(db, user=current_user, profile_in=profile_in)
    return ProfileResponse(user=UserResponse.from_user(user))
