# tests/http_api/test_taxonomy_api.py
from tests.conftest import ADMIN, READER


def test_create_and_list_categories(client):
    resp = client.post(
        "/api/categories",
        json={"name": "Home & Garden", "description": "Home improvement"},
        headers=ADMIN,
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["category"]["slug"] == "home-garden"

    listed = client.get("/api/categories").json()["data"]["categories"]
    assert [c["name"] for c in listed] == ["Home & Garden"]


def test_duplicate_category(client):
    client.post("/api/categories", json={"name": "Sports"}, headers=ADMIN)
    resp = client.post("/api/categories", json={"name": "sports"}, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.json()["error"] == "duplicate"


def test_create_tag_requires_admin(client):
    assert client.post("/api/tags", json={"name": "Premium"}, headers=READER).status_code == 403
    assert client.post("/api/tags", json={"name": "Premium"}, headers=ADMIN).status_code == 201
    assert [t["slug"] for t in client.get("/api/tags").json()["data"]["tags"]] == ["premium"]


def test_unknown_fields_are_rejected(client):
    resp = client.post("/api/tags", json={"name": "X", "color": "red"}, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation failed"
