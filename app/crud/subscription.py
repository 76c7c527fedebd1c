"""CRUD operations for Subscription."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.subscription import ACTIVE_SUBSCRIPTION_STATUSES, Subscription


class CRUDSubscription(CRUDBase[Subscription, dict, dict]):
    def get_by_user_id(self, db: Session, user_id: int) -> Optional[Subscription]:
        stmt = select(Subscription).where(Subscription.user_id == user_id).limit(1)
        return db.scalars(stmt).first()

    def count_active(self, db: Session, *, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        stmt = select(func.count(Subscription.id)).where(
            Subscription.status.in_(ACTIVE_SUBSCRIPTION_STATUSES),
            or_(Subscription.current_period_end.is_(None), Subscription.current_period_end > now),
        )
        return db.scalar(stmt) or 0


# Singleton instance
crud_subscription = CRUDSubscription(Subscription)
