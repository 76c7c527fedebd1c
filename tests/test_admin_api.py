from datetime import datetime, timedelta

import pytest

from app.models.post import Post, PostStatus
from tests.conftest import auth

ADMIN = auth("admin-token")


class TestAdminAccess:
    def test_requires_token(self, client):
        assert client.get("/api/admin/posts").status_code == 401

    def test_requires_admin_role(self, client):
        response = client.get("/api/admin/posts", headers=auth("reader-token"))

        assert response.status_code == 403

    def test_metrics_require_admin_role(self, client):
        assert client.get("/api/admin/metrics", headers=auth("reader-token")).status_code == 403


class TestCreatePost:
    def test_create_derives_preview_and_labels(self, client, db):
        content = "lorem ipsum " * 60
        response = client.post(
            "/api/admin/posts",
            headers=ADMIN,
            json={
                "title": "  Hello world  ",
                "content": content,
                "readingTime": 7,
                "isPremium": True,
                "status": "published",
                "labels": ["news", " news ", "", "tech"],
            },
        )

        assert response.status_code == 201
        body = response.json()
        post = body["post"]
        assert body["message"] == "Post created successfully"
        assert post["title"] == "Hello world"
        assert post["status"] == "PUBLISHED"
        assert post["readingTime"] == 7
        assert post["isPremium"] is True
        assert post["preview"].endswith("...")
        assert len(post["preview"]) <= 503
        assert post["labels"] == ["news", "tech"]

        stored = db.get(Post, post["id"])
        assert stored.like_count == 0
        assert stored.view_count == 0

    def test_create_defaults_to_draft(self, client):
        response = client.post("/api/admin/posts", headers=ADMIN, json={"title": "T", "content": "Body"})

        assert response.status_code == 201
        assert response.json()["post"]["status"] == "DRAFT"
        assert response.json()["post"]["readingTime"] is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "", "content": "Body"},
            {"title": "   ", "content": "Body"},
            {"title": "T", "content": "   "},
            {"title": "T", "content": "Body", "status": "LIVE"},
            {"title": "T", "content": "Body", "readingTime": -1},
            {"content": "Body"},
        ],
    )
    def test_create_rejects_invalid_input(self, client, payload):
        response = client.post("/api/admin/posts", headers=ADMIN, json=payload)

        assert response.status_code == 400


class TestUpdatePost:
    def test_partial_update(self, client, db, make_post):
        post = make_post(title="Old title", content="Old content", labels=["a", "b"])

        response = client.put(
            f"/api/admin/posts/{post.id}",
            headers=ADMIN,
            json={"content": "New content", "labels": ["b", "c"]},
        )

        assert response.status_code == 200
        updated = response.json()["post"]
        assert updated["title"] == "Old title"
        assert updated["content"] == "New content"
        assert updated["preview"] == "New content"
        assert updated["labels"] == ["b", "c"]

    def test_update_bumps_updated_on(self, client, db, make_post):
        post = make_post()
        post.updated_at = datetime(2020, 1, 1)
        db.commit()

        client.put(f"/api/admin/posts/{post.id}", headers=ADMIN, json={"title": "Renamed"})

        db.expire_all()
        assert db.get(Post, post.id).updated_at > datetime(2020, 1, 1)

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": None},
            {"content": None},
            {"status": None},
            {"isPremium": None},
            {"labels": None},
        ],
    )
    def test_update_rejects_null_for_required_fields(self, client, db, make_post, payload):
        post = make_post(title="Keep me", content="Keep this body")

        response = client.put(f"/api/admin/posts/{post.id}", headers=ADMIN, json=payload)

        assert response.status_code == 400
        db.expire_all()
        stored = db.get(Post, post.id)
        assert stored.title == "Keep me"
        assert stored.content == "Keep this body"
        assert stored.status == PostStatus.PUBLISHED.value

    def test_update_null_clears_optional_fields(self, client, make_post):
        post = make_post(image="https://img.example.com/a.png", reading_time=8)

        response = client.put(
            f"/api/admin/posts/{post.id}", headers=ADMIN, json={"image": None, "readingTime": None}
        )

        assert response.status_code == 200
        assert response.json()["post"]["image"] == ""
        assert response.json()["post"]["readingTime"] is None

    def test_update_without_fields_is_bad_request(self, client, make_post):
        post = make_post()

        response = client.put(f"/api/admin/posts/{post.id}", headers=ADMIN, json={})

        assert response.status_code == 400

    def test_update_missing_post(self, client):
        response = client.put("/api/admin/posts/999", headers=ADMIN, json={"title": "X"})

        assert response.status_code == 404

    def test_status_change(self, client, make_post):
        post = make_post(status=PostStatus.DRAFT)

        response = client.patch(f"/api/admin/posts/{post.id}/status", headers=ADMIN, json={"status": "PUBLISHED"})

        assert response.json() == {"success": True, "id": post.id, "status": "PUBLISHED"}
        assert client.get(f"/api/content/posts/{post.id}").status_code == 200

        client.patch(f"/api/admin/posts/{post.id}/status", headers=ADMIN, json={"status": "archived"})
        assert client.get(f"/api/content/posts/{post.id}").status_code == 404

    def test_status_change_rejects_unknown_status(self, client, make_post):
        post = make_post()

        response = client.patch(f"/api/admin/posts/{post.id}/status", headers=ADMIN, json={"status": "GONE"})

        assert response.status_code == 400


class TestAdminList:
    def test_lists_every_status(self, client, make_post):
        make_post(title="Draft", status=PostStatus.DRAFT)
        make_post(title="Published")
        make_post(title="Archived", status=PostStatus.ARCHIVED)

        body = client.get("/api/admin/posts", headers=ADMIN).json()

        assert {post["title"] for post in body["posts"]} == {"Draft", "Published", "Archived"}
        assert body["sort"] == "date"

    def test_status_filter(self, client, make_post):
        make_post(title="Draft", status=PostStatus.DRAFT)
        make_post(title="Published")

        body = client.get("/api/admin/posts?status=draft", headers=ADMIN).json()

        assert [post["title"] for post in body["posts"]] == ["Draft"]
        assert body["filters"]["status"] == "DRAFT"

    def test_sort_by_likes(self, client, make_post):
        quiet = make_post(title="Quiet")
        popular = make_post(title="Popular")
        client.post(f"/api/content/posts/{popular.id}/like", headers=auth("reader-token"))
        client.post(f"/api/content/posts/{popular.id}/like", headers=auth("other-token"))
        client.post(f"/api/content/posts/{quiet.id}/like", headers=auth("reader-token"))

        body = client.get("/api/admin/posts?sort=likes", headers=ADMIN).json()

        assert [post["title"] for post in body["posts"]] == ["Popular", "Quiet"]
        assert body["posts"][0]["numberOfLikes"] == 2

    def test_date_sort_uses_last_edit(self, client, db, make_post):
        older = make_post(title="Older", created_at=datetime(2026, 1, 1))
        make_post(title="Newer", created_at=datetime(2026, 1, 2))
        older.updated_at = datetime.utcnow() + timedelta(days=1)
        db.commit()

        body = client.get("/api/admin/posts?sort=date", headers=ADMIN).json()

        assert body["posts"][0]["title"] == "Older"

    def test_invalid_sort(self, client):
        response = client.get("/api/admin/posts?sort=random", headers=ADMIN)

        assert response.status_code == 400

    def test_invalid_status_filter(self, client):
        response = client.get("/api/admin/posts?status=LIVE", headers=ADMIN)

        assert response.status_code == 400

    def test_detail_includes_drafts(self, client, make_post):
        post = make_post(status=PostStatus.DRAFT, content="Draft body")

        body = client.get(f"/api/admin/posts/{post.id}", headers=ADMIN).json()

        assert body["post"]["content"] == "Draft body"
        assert body["post"]["preview"] == "Draft body"

    def test_detail_missing(self, client):
        assert client.get("/api/admin/posts/31337", headers=ADMIN).status_code == 404


def test_metrics_endpoint_returns_snapshot(client, make_user, make_post):
    make_user(auth0_id="auth0|someone")
    make_post()

    body = client.get("/api/admin/metrics", headers=ADMIN).json()

    assert body["totalPublishedPosts"] == 1
    assert body["totalUsers"] >= 1
    assert len(body["userSignups"]) == 7
    assert len(body["top5MostLikedPosts"]) == 1
