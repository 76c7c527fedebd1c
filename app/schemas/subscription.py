"""Subscription status schema."""

from app.schemas.base import CamelModel


class SubscriptionStatus(CamelModel):
    active: bool = False
    syncing: bool = False
    plan: str = ""
    renewal: str = ""  # ISO date of the current period end
    status: str = ""
