# tests/test_auth.py
import pytest

from storefront_http_api.auth import Actor, Role
from storefront_http_api.config import AppEnv, Settings
from storefront_http_api.dependencies import verify_gateway_key
from storefront_http_api.errors import ForbiddenError, UnauthorizedError, UnexpectedError


def test_owner_and_admin_can_modify():
    owner = Actor(user_id="u-1")
    admin = Actor(user_id="a-1", role=Role.ADMIN)
    stranger = Actor(user_id="u-2")

    assert owner.can_modify("u-1")
    assert admin.can_modify("u-1")
    assert not stranger.can_modify("u-1")
    assert not owner.can_modify(None)


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_gateway_key_checks():
    settings = _settings(API_SECRET="k1 k2")

    verify_gateway_key(settings, "k2")
    verify_gateway_key(settings, "Bearer k1")
    with pytest.raises(UnauthorizedError):
        verify_gateway_key(settings, "   ")
    with pytest.raises(ForbiddenError):
        verify_gateway_key(settings, "k3")


def test_missing_secret_depends_on_environment():
    verify_gateway_key(_settings(APP_ENV=AppEnv.DEVELOPMENT), None)
    with pytest.raises(UnexpectedError):
        verify_gateway_key(_settings(APP_ENV=AppEnv.PRODUCTION), "anything")
