"""Metrics schemas for the admin dashboard."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.base import CamelModel


class TopPostMetric(CamelModel):
    id: int
    title: str
    number_of_likes: Optional[int] = None
    number_of_comments: Optional[int] = None


class MetricsResponse(CamelModel):
    """Snapshot of dashboard metrics. All-zero when the snapshot could not be computed."""
    total_users: int = 0
    new_users_in_last_7_days: int = 0
    new_users_in_last_30_days: int = 0
    total_published_posts: int = 0
    new_published_posts_in_last_7_days: int = 0
    new_published_posts_in_last_30_days: int = 0
    total_active_subscriptions: int = 0
    top5_most_liked_posts: List[TopPostMetric] = Field(default_factory=list)
    top5_most_commented_posts: List[TopPostMetric] = Field(default_factory=list)
    user_signups: List[int] = Field(default_factory=list, description="Daily signups, oldest day first")
    published_posts: List[int] = Field(default_factory=list, description="Daily published posts, oldest day first")
    generated_at: Optional[datetime] = None
