# tests/http_api/test_system_api.py
from tests.conftest import ADMIN, PNG, READER


def test_liveness(client):
    assert client.get("/health/live").json() == {"status": "ok"}


def test_readiness_reports_each_check(client):
    resp = client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "ok", "checks": {"database": "ok", "storage": "ok"}}


def test_readiness_degrades_when_storage_is_down(client, storage, monkeypatch):
    monkeypatch.setattr(storage, "health_check", lambda: False)
    resp = client.get("/health/ready")
    assert resp.status_code == 503
    assert resp.json()["data"]["checks"]["storage"] == "unavailable"


def test_standalone_upload(client, storage, settings):
    resp = client.post(
        "/api/uploads/images",
        params={"bucket": "products"},
        files={"image": ("shoe.png", PNG, "image/png")},
        headers=ADMIN,
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert (settings.PRODUCTS_BUCKET, data["path"]) in storage.objects
    assert data["url"] == storage.public_url(data["path"], settings.PRODUCTS_BUCKET)


def test_upload_rejects_oversized_and_unauthorized(client):
    too_big = b"\x89PNG" + b"\x00" * (5 * 1024 * 1024)
    resp = client.post("/api/uploads/images", files={"image": ("big.png", too_big, "image/png")}, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.json()["message"] == "File too large. Maximum size is 5MB."

    small = {"image": ("ok.png", PNG, "image/png")}
    assert client.post("/api/uploads/images", files=small, headers=READER).status_code == 403


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nothing")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Not Found"}
