import os
import tempfile

# Settings are read at import time; point them at a throwaway SQLite file first
_TEST_DB_DIR = tempfile.mkdtemp(prefix="content-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ["AUTH0_DOMAIN"] = "tenant.test.example.com"
os.environ["AUTH0_AUDIENCE"] = "https://content-api.test"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.config import settings
from app.core.exceptions import InvalidCredentialsException
from app.crud.post import crud_post
from app.database import Base, SessionLocal, engine
from app.main import app
from app.models.post import PostStatus
from app.models.subscription import Subscription
from app.models.user import User
from app.schemas.post import PostCreate
from app.services.metrics_service import metrics_service

# Bearer token -> verified claims
TOKENS = {
    "reader-token": {
        "sub": "auth0|reader",
        "email": "reader@example.com",
        "given_name": "Ada",
        "family_name": "Reader",
    },
    "other-token": {
        "sub": "auth0|other",
        "email": "other@example.com",
    },
    "admin-token": {
        "sub": "auth0|admin",
        "email": "admin@example.com",
        settings.AUTH0_ROLES_CLAIM: [settings.ADMIN_ROLE],
    },
}


def fake_decode_token(token, client=None):
    if token not in TOKENS:
        raise InvalidCredentialsException()
    return dict(TOKENS[token])


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    metrics_service.invalidate()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(deps, "decode_token", fake_decode_token)
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make_user(auth0_id="auth0|reader", created_at=None, **fields):
        user = User(auth0_id=auth0_id, email=fields.pop("email", f"{auth0_id}@example.com"), **fields)
        if created_at is not None:
            user.created_at = created_at
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_post(db):
    def _make_post(
        title="A post",
        content="Some post content",
        status=PostStatus.PUBLISHED,
        labels=(),
        created_at=None,
        **fields,
    ):
        post = crud_post.create_post(
            db,
            post_in=PostCreate(
                title=title,
                content=content,
                status=status.name,
                labels=list(labels),
                **fields,
            ),
        )
        if created_at is not None:
            post.created_at = created_at
            db.commit()
            db.refresh(post)
        return post
    return _make_post


@pytest.fixture
def make_subscription(db):
    def _make_subscription(user, status="active", current_period_end=None, plan="monthly"):
        subscription = Subscription(
            user_id=user.id,
            status=status,
            plan=plan,
            current_period_end=current_period_end,
            updated_at=datetime.utcnow(),
        )
        db.add(subscription)
        db.commit()
        db.refresh(subscription)
        return subscription
    return _make_subscription
