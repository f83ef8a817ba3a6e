# tests/http_api/test_security_api.py
from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient

from storefront_http_api.config import AppEnv
from storefront_http_api.main import create_app
from tests.conftest import ADMIN, READER, make_post


@contextmanager
def _client_with(container, settings, **overrides):
    app = create_app(container=container, settings=settings.model_copy(update=overrides))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def post(session):
    return make_post(session, "Guarded")


def test_headers_are_trusted_without_secret_outside_production(client, post):
    resp = client.post(f"/api/posts/{post.id}/like", headers=READER)
    assert resp.status_code == 200


def test_missing_key_when_secret_configured(container, settings, post):
    with _client_with(container, settings, API_SECRET="s3cret") as c:
        resp = c.post(f"/api/posts/{post.id}/like", headers=READER)
    assert resp.status_code == 401
    assert resp.json()["message"] == "Missing X-API-Key header"


def test_wrong_key_is_forbidden(container, settings, post):
    with _client_with(container, settings, API_SECRET="s3cret") as c:
        resp = c.post(f"/api/posts/{post.id}/like", headers={**READER, "X-API-Key": "nope"})
    assert resp.status_code == 403


@pytest.mark.parametrize("presented", ["old-key", "new-key", "Bearer new-key"])
def test_rotated_keys_are_accepted(container, settings, post, presented):
    with _client_with(container, settings, API_SECRET="old-key, new-key") as c:
        resp = c.post(f"/api/posts/{post.id}/like", headers={**READER, "X-API-Key": presented})
    assert resp.status_code == 200


def test_anonymous_reads_need_no_key(container, settings, post):
    with _client_with(container, settings, API_SECRET="s3cret") as c:
        assert c.get("/api/posts/guarded").status_code == 200


def test_production_without_secret_fails_closed(container, settings, post):
    with _client_with(container, settings, APP_ENV=AppEnv.PRODUCTION) as c:
        resp = c.post(f"/api/posts/{post.id}/like", headers=ADMIN)
        docs = c.get("/docs")
    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert docs.status_code == 404


def test_role_header_other_than_admin_is_a_user(client):
    headers = {"X-User-Id": "sneaky", "X-User-Role": "superuser"}
    resp = client.post("/api/categories", json={"name": "Nope"}, headers=headers)
    assert resp.status_code == 403
