"""Dashboard metrics aggregation with an in-process snapshot cache."""

import asyncio
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from app.config import settings
from app.crud.post import crud_post
from app.database import SessionLocal
from app.models.post import Post, PostStatus
from app.models.user import User
from app.schemas.metrics import MetricsResponse, TopPostMetric
from app.services.subscription_service import SubscriptionService, subscription_service

logger = logging.getLogger(__name__)

HISTOGRAM_DAYS = 7


def daily_histogram(timestamps: List[datetime], today: date, days: int = HISTOGRAM_DAYS) -> List[int]:
    """Count timestamps per calendar day for the `days` days ending `today`, oldest first."""
    first_day = today - timedelta(days=days - 1)
    buckets = [0] * days
    for ts in timestamps:
        if ts is None:
            continue
        index = (ts.date() - first_day).days
        if 0 <= index < days:
            buckets[index] += 1
    return buckets


class MetricsService:
    """
    Computes the admin dashboard snapshot and caches it for a fixed window.

    A fresh snapshot is returned unchanged until it is older than `ttl`.
    Recomputation runs its queries in parallel worker threads, each with its
    own session, and concurrent cache misses share a single recomputation.
    Any failure yields an all-zero snapshot, which is not cached.
    """

    def __init__(
        self,
        session_factory: sessionmaker = SessionLocal,
        *,
        subscriptions: Optional[SubscriptionService] = None,
        ttl: Optional[timedelta] = None,
        top_count: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.session_factory = session_factory
        self.subscriptions = subscriptions or subscription_service
        self.ttl = ttl or timedelta(minutes=settings.METRICS_CACHE_TTL_MINUTES)
        self.top_count = top_count or settings.METRICS_TOP_POSTS
        self.clock = clock
        self._data: Optional[MetricsResponse] = None
        self._timestamp: Optional[datetime] = None
        self._lock = asyncio.Lock()

    def _is_fresh(self, now: datetime) -> bool:
        return (
            self._data is not None
            and self._timestamp is not None
            and now - self._timestamp < self.ttl
        )

    def invalidate(self) -> None:
        self._data = None
        self._timestamp = None

    async def get_metrics(self) -> MetricsResponse:
        if self._is_fresh(self.clock()):
            logger.debug("Returning cached metrics data")
            return self._data

        async with self._lock:
            # Another request may have refreshed while we waited
            now = self.clock()
            if self._is_fresh(now):
                return self._data

            try:
                logger.info("Fetching fresh metrics data")
                snapshot = await self._compute(now)
            except Exception:
                logger.exception("Error getting metrics")
                return MetricsResponse()

            self._data = snapshot
            self._timestamp = now
            return snapshot

    async def _compute(self, now: datetime) -> MetricsResponse:
        counts, active_subscriptions, most_liked, most_commented, histograms = await asyncio.gather(
            asyncio.to_thread(self._in_session, self._collect_counts, now),
            asyncio.to_thread(self._in_session, self.subscriptions.count_active),
            asyncio.to_thread(self._in_session, self._collect_top_posts, "likes"),
            asyncio.to_thread(self._in_session, self._collect_top_posts, "comments"),
            asyncio.to_thread(self._in_session, self._collect_histograms, now),
        )

        return MetricsResponse(
            **counts,
            total_active_subscriptions=active_subscriptions,
            top5_most_liked_posts=[
                TopPostMetric(id=row["id"], title=row["title"], number_of_likes=row["count"])
                for row in most_liked
            ],
            top5_most_commented_posts=[
                TopPostMetric(id=row["id"], title=row["title"], number_of_comments=row["count"])
                for row in most_commented
            ],
            user_signups=histograms["user_signups"],
            published_posts=histograms["published_posts"],
            generated_at=now,
        )

    def _in_session(self, fn: Callable, *args):
        db = self.session_factory()
        try:
            return fn(db, *args)
        finally:
            db.close()

    def _collect_counts(self, db: Session, now: datetime) -> Dict[str, int]:
        week_ago = now - timedelta(days=7)
        month_ago = now - timedelta(days=30)
        published = Post.status == PostStatus.PUBLISHED.value

        def users_since(since: Optional[datetime]):
            stmt = select(func.count(User.id))
            if since is not None:
                stmt = stmt.where(User.created_at >= since)
            return stmt.scalar_subquery()

        def posts_since(since: Optional[datetime]):
            stmt = select(func.count(Post.id)).where(published)
            if since is not None:
                stmt = stmt.where(Post.created_at >= since)
            return stmt.scalar_subquery()

        row = db.execute(
            select(
                users_since(None).label("total_users"),
                users_since(week_ago).label("new_users_in_last_7_days"),
                users_since(month_ago).label("new_users_in_last_30_days"),
                posts_since(None).label("total_published_posts"),
                posts_since(week_ago).label("new_published_posts_in_last_7_days"),
                posts_since(month_ago).label("new_published_posts_in_last_30_days"),
            )
        ).mappings().one()
        return {key: int(value or 0) for key, value in row.items()}

    def _collect_top_posts(self, db: Session, by: str) -> List[dict]:
        return crud_post.get_top_posts(db, by=by, limit=self.top_count)

    def _collect_histograms(self, db: Session, now: datetime) -> Dict[str, List[int]]:
        today = now.date()
        since = datetime.combine(today - timedelta(days=HISTOGRAM_DAYS - 1), datetime.min.time())

        user_created = db.scalars(select(User.created_at).where(User.created_at >= since)).all()
        post_created = db.scalars(
            select(Post.created_at).where(
                Post.status == PostStatus.PUBLISHED.value,
                Post.created_at >= since,
            )
        ).all()

        return {
            "user_signups": daily_histogram(list(user_created), today),
            "published_posts": daily_histogram(list(post_created), today),
        }


metrics_service = MetricsService()
