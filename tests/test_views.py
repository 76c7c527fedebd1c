from datetime import datetime, timedelta

from sqlalchemy import select

from app.config import settings
from app.crud.post_view import crud_post_view
from app.models.post import Post
from app.models.post_view import PostView
from tests.conftest import auth


def _view_count(db, post_id):
    db.expire_all()
    return db.get(Post, post_id).view_count


def test_view_cooldown_uses_reading_time(db, make_user, make_post):
    user = make_user()
    post = make_post(reading_time=3)
    start = datetime(2026, 3, 1, 9, 0, 0)

    assert crud_post_view.track_view(db, post_id=post.id, user_id=user.id, now=start) is True
    assert crud_post_view.track_view(db, post_id=post.id, user_id=user.id, now=start + timedelta(minutes=2)) is False
    assert crud_post_view.track_view(db, post_id=post.id, user_id=user.id, now=start + timedelta(minutes=3)) is True
    assert _view_count(db, post.id) == 2


def test_view_cooldown_defaults_without_reading_time(db, make_user, make_post):
    user = make_user()
    post = make_post()
    start = datetime(2026, 3, 1, 9, 0, 0)
    cooldown = timedelta(minutes=settings.DEFAULT_READING_TIME_MINUTES)

    crud_post_view.track_view(db, post_id=post.id, user_id=user.id, now=start)

    assert crud_post_view.track_view(db, post_id=post.id, user_id=user.id, now=start + cooldown - timedelta(seconds=1)) is False
    assert crud_post_view.track_view(db, post_id=post.id, user_id=user.id, now=start + cooldown) is True


def test_views_are_counted_per_user(db, make_user, make_post):
    first = make_user(auth0_id="auth0|first")
    second = make_user(auth0_id="auth0|second")
    post = make_post()
    now = datetime(2026, 3, 1, 9, 0, 0)

    crud_post_view.track_view(db, post_id=post.id, user_id=first.id, now=now)
    crud_post_view.track_view(db, post_id=post.id, user_id=second.id, now=now)

    assert _view_count(db, post.id) == 2


def test_view_of_missing_post_is_not_recorded(db, make_user):
    user = make_user()

    assert crud_post_view.track_view(db, post_id=777, user_id=user.id) is False


def test_request_context_is_truncated(db, make_user, make_post):
    user = make_user()
    post = make_post()

    crud_post_view.track_view(db, post_id=post.id, user_id=user.id, ip_address="10.0.0.1", user_agent="x" * 900)

    view = db.scalars(select(PostView)).one()
    assert view.ip_address == "10.0.0.1"
    assert len(view.user_agent) == 500


def test_tracking_failure_does_not_break_detail(client, db, make_user, make_post, monkeypatch):
    make_user(auth0_id="auth0|reader")
    post = make_post(content="Still readable")

    def broken_count(db, *, post_id):
        raise RuntimeError("views table unavailable")

    monkeypatch.setattr(crud_post_view, "count_views", broken_count)
    response = client.get(f"/api/content/posts/{post.id}", headers=auth("reader-token"))

    assert response.status_code == 200
    assert response.json()["post"]["content"] == "Still readable"
    assert _view_count(db, post.id) == 0
    assert db.scalars(select(PostView)).all() == []
