"""Billing state lookups used by content gating and metrics."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.crud.subscription import crud_subscription
from app.models.subscription import ACTIVE_SUBSCRIPTION_STATUSES, Subscription
from app.schemas.subscription import SubscriptionStatus

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Read access to subscription state.

    The rows are written by the payment provider integration; this service
    only interprets them.
    """

    @staticmethod
    def is_active(subscription: Optional[Subscription], now: Optional[datetime] = None) -> bool:
        if subscription is None or subscription.status not in ACTIVE_SUBSCRIPTION_STATUSES:
            return False
        now = now or datetime.utcnow()
        return subscription.current_period_end is None or subscription.current_period_end > now

    def get_status(self, db: Session, user_id: Optional[int]) -> SubscriptionStatus:
        """Subscription status for a local user; inactive when there is no record."""
        if not user_id:
            return SubscriptionStatus()

        subscription = crud_subscription.get_by_user_id(db, user_id)
        if subscription is None:
            return SubscriptionStatus()

        renewal = subscription.current_period_end
        return SubscriptionStatus(
            active=self.is_active(subscription),
            plan=subscription.plan or "",
            renewal=renewal.date().isoformat() if renewal else "",
            status=subscription.status or "",
        )

    def has_active_subscription(self, db: Session, user_id: Optional[int]) -> bool:
        return self.get_status(db, user_id).active

    def count_active(self, db: Session) -> int:
        return crud_subscription.count_active(db)


subscription_service = SubscriptionService()
