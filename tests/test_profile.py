from datetime import datetime, timedelta

from sqlalchemy import func, select

from app.models.user import User
from tests.conftest import auth


def test_profile_is_created_on_first_request(client, db):
    first = client.get("/api/profile/me", headers=auth("reader-token"))
    second = client.get("/api/profile/me", headers=auth("reader-token"))

    assert first.status_code == 200
    user = first.json()["user"]
    assert user["email"] == "reader@example.com"
    assert user["firstName"] == "Ada"
    assert user["isAdmin"] is False
    assert second.json()["user"]["id"] == user["id"]
    assert db.scalar(select(func.count()).select_from(User)) == 1


def test_admin_flag_follows_token(client):
    body = client.get("/api/profile/me", headers=auth("admin-token")).json()

    assert body["user"]["isAdmin"] is True


def test_update_profile(client):
    response = client.post(
        "/api/profile",
        headers=auth("reader-token"),
        json={"firstName": " Grace ", "lastName": "Hopper", "picture": "https://img.example.com/g.png"},
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["firstName"] == "Grace"
    assert user["lastName"] == "Hopper"
    assert user["avatar"] == "https://img.example.com/g.png"


def test_update_profile_requires_names(client):
    response = client.post("/api/profile", headers=auth("reader-token"), json={"firstName": "Grace"})

    assert response.status_code == 400


def test_subscription_status_without_subscription(client):
    body = client.get("/api/subscription/status", headers=auth("reader-token")).json()

    assert body == {"active": False, "syncing": False, "plan": "", "renewal": "", "status": ""}


def test_subscription_status_active(client, make_user, make_subscription):
    user = make_user(auth0_id="auth0|reader")
    period_end = datetime.utcnow() + timedelta(days=20)
    make_subscription(user, status="trialing", plan="yearly", current_period_end=period_end)

    body = client.get("/api/subscription/status", headers=auth("reader-token")).json()

    assert body["active"] is True
    assert body["plan"] == "yearly"
    assert body["status"] == "trialing"
    assert body["renewal"] == period_end.date().isoformat()


def test_cancelled_subscription_is_inactive(client, make_user, make_subscription):
    user = make_user(auth0_id="auth0|reader")
    make_subscription(user, status="canceled", current_period_end=datetime.utcnow() + timedelta(days=3))

    body = client.get("/api/subscription/status", headers=auth("reader-token")).json()

    assert body["active"] is False


def test_new_user_creation_time_is_utc(client, db):
    before = datetime.utcnow()
    client.get("/api/profile/me", headers=auth("reader-token"))
    after = datetime.utcnow()

    created_at = db.scalars(select(User.created_at)).one()
    assert before - timedelta(seconds=1) <= created_at <= after + timedelta(seconds=1)
