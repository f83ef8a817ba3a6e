# tests/http_api/test_posts_api.py

from storefront_http_api.db import models
from tests.conftest import ADMIN, AUTHOR, PNG, READER, make_category, make_post


def _create(client, headers=ADMIN, **fields):
    data = {"title": "Hello World", "content": "A body that is long enough.", **fields}
    return client.post("/api/posts", data=data, headers=headers)


def test_list_uses_envelope_and_camel_case(client, session):
    tech = make_category(session, "Tech")
    make_post(session, "First Post", category=tech, views=3)

    resp = client.get("/api/posts")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    post = body["data"]["posts"][0]
    assert post["slug"] == "first-post"
    assert post["category"]["slug"] == "tech"
    assert {"authorId", "likeCount", "commentCount", "featuredImage", "publishedAt"} <= post.keys()
    assert body["data"]["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}


def test_list_paginates_and_filters(client, session):
    for i in range(12):
        make_post(session, f"Post {i}")
    make_post(session, "Gardening Basics", content="All about soil and seeds.")

    second = client.get("/api/posts", params={"page": 2, "limit": 5}).json()["data"]
    assert len(second["posts"]) == 5
    assert second["pagination"]["pages"] == 3

    found = client.get("/api/posts", params={"search": "SOIL"}).json()["data"]["posts"]
    assert [p["title"] for p in found] == ["Gardening Basics"]


def test_unknown_sort_falls_back_to_newest(client, session):
    make_post(session, "Only One")
    assert client.get("/api/posts", params={"sort": "sideways"}).status_code == 200


def test_create_requires_admin(client):
    assert _create(client, headers={}).status_code == 401
    resp = _create(client, headers=READER)
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "message": "Admin access required", "error": "forbidden"}


def test_create_multipart_with_image(client, storage, settings):
    resp = client.post(
        "/api/posts",
        data={
            "title": "Top 5 Gadgets",
            "content": "A body that is long enough.",
            "status": "published",
            "tags": "Premium, Bestseller",
        },
        files={"image": ("cover.png", PNG, "image/png")},
        headers=ADMIN,
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Post created successfully"
    post = body["data"]["post"]
    assert post["slug"] == "top-5-gadgets"
    assert post["publishedAt"] is not None
    assert post["featuredImage"].startswith(f"{storage.public_base_url}/{settings.POSTS_BUCKET}/cover-")
    assert sorted(t["slug"] for t in post["tags"]) == ["bestseller", "premium"]


def test_create_rejects_non_image_upload(client, session):
    resp = client.post(
        "/api/posts",
        data={"title": "Bad", "content": "A body that is long enough."},
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=ADMIN,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "upload_error"
    assert session.query(models.Post).count() == 0


def test_create_validation_lists_fields(client):
    resp = _create(client, content="short")
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "validation_error"
    assert [e["field"] for e in body["data"]["errors"]] == ["content"]


def test_detail_counts_views_and_hides_drafts(client, session):
    make_post(session, "Public", views=150)
    make_post(session, "Draft Note", status=models.PostStatus.DRAFT)

    assert client.get("/api/posts/public").json()["data"]["post"]["views"] == 151
    assert client.get("/api/posts/public").json()["data"]["post"]["views"] == 152

    missing = client.get("/api/posts/draft-note")
    assert missing.status_code == 404
    assert missing.json()["success"] is False
    assert client.get("/api/posts/draft-note", headers=READER).status_code == 404
    assert client.get("/api/posts/draft-note", headers=AUTHOR).status_code == 200


def test_update_ownership(client, session):
    post = make_post(session, "Mine")

    assert client.put(f"/api/posts/{post.id}", json={"excerpt": "x"}).status_code == 401
    assert client.put(f"/api/posts/{post.id}", json={"excerpt": "x"}, headers=READER).status_code == 403
    assert client.put("/api/posts/9999", json={"excerpt": "x"}, headers=READER).status_code == 404

    resp = client.put(f"/api/posts/{post.id}", json={"title": "Renamed"}, headers=AUTHOR)
    assert resp.status_code == 200
    assert resp.json()["data"]["post"]["slug"] == "renamed"


def test_update_can_clear_category(client, session):
    tech = make_category(session, "Tech")
    post = make_post(session, "Categorized", category=tech)

    resp = client.put(f"/api/posts/{post.id}", data={"category": ""}, headers=ADMIN)

    assert resp.status_code == 200
    assert resp.json()["data"]["post"]["category"] is None


def test_delete_post(client, session):
    post = make_post(session, "Short Lived")

    resp = client.delete(f"/api/posts/{post.id}", headers=AUTHOR)

    assert resp.json() == {"success": True, "message": "Post deleted successfully"}
    assert client.get("/api/posts/short-lived").status_code == 404


def test_comments_and_likes(client, session):
    post = make_post(session, "Engaging")

    assert client.post(f"/api/posts/{post.id}/comments", json={"content": "Hi"}).status_code == 401
    created = client.post(f"/api/posts/{post.id}/comments", json={"content": "Great read"}, headers=READER)
    assert created.status_code == 201
    assert created.json()["data"]["comment"]["userId"] == "reader-1"

    empty = client.post(f"/api/posts/{post.id}/comments", json={"content": ""}, headers=READER)
    assert empty.status_code == 400

    liked = client.post(f"/api/posts/{post.id}/like", headers=READER).json()["data"]
    unliked = client.post(f"/api/posts/{post.id}/like", headers=READER).json()["data"]
    assert liked == {"likes": 1, "isLiked": True}
    assert unliked == {"likes": 0, "isLiked": False}

    detail = client.get("/api/posts/engaging").json()["data"]["post"]
    assert detail["commentCount"] == 1
    assert detail["comments"][0]["content"] == "Great read"


def test_post_categories(client, session):
    tech = make_category(session, "Tech")
    make_category(session, "Empty")
    make_post(session, "Gadgets", category=tech)

    data = client.get("/api/posts/categories").json()["data"]
    assert [c["slug"] for c in data["categories"]] == ["tech"]
