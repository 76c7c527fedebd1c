"""Services package for the content API."""

from .metrics_service import metrics_service, MetricsService
from .subscription_service import subscription_service, SubscriptionService

__all__ = [
    "metrics_service",
    "MetricsService",
    "subscription_service",
    "SubscriptionService",
]
