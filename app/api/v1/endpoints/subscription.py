"""Subscription status endpoint."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.models.user import User
from app.schemas.subscription import SubscriptionStatus
from app.services.subscription_service import subscription_service

router = APIRouter(
    prefix="/subscription",
    tags=["Subscription"],
)


@router.get(
    "/status",
    response_model=SubscriptionStatus,
    status_code=status.HTTP_200_OK,
    summary="Get my subscription status",
)
def get_subscription_status(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SubscriptionStatus:
    return subscription_service.get_status(db, current_user.id)
