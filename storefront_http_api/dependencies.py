# storefront_http_api/dependencies.py

from __future__ import annotations

import re
import secrets
from typing import Generator, Optional

from fastapi import Depends, Header, Request, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from storefront_http_api.auth import Actor, Role
from storefront_http_api.config import AppEnv, Settings
from storefront_http_api.container import Container
from storefront_http_api.db.session import session_scope
from storefront_http_api.errors import ForbiddenError, UnauthorizedError, UnexpectedError
from storefront_http_api.logging import get_logger
from storefront_http_api.services import PostsService, ProductsService, TaxonomyService
from storefront_http_api.storage import StorageGateway

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Container / session
# -----------------------------------------------------------------------------


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_settings_dep(container: Container = Depends(get_container)) -> Settings:
    return container.settings()


def get_session(container: Container = Depends(get_container)) -> Generator[Session, None, None]:
    """One SQLAlchemy session per request."""
    yield from session_scope(container.session_factory())


def get_storage(container: Container = Depends(get_container)) -> StorageGateway:
    return container.storage_gateway()


def get_posts_service(
    container: Container = Depends(get_container),
    session: Session = Depends(get_session),
) -> PostsService:
    return container.posts_service(session=session)


def get_products_service(
    container: Container = Depends(get_container),
    session: Session = Depends(get_session),
) -> ProductsService:
    return container.products_service(session=session)


def get_taxonomy_service(
    container: Container = Depends(get_container),
    session: Session = Depends(get_session),
) -> TaxonomyService:
    return container.taxonomy_service(session=session)


# -----------------------------------------------------------------------------
# Security: gateway API key
# -----------------------------------------------------------------------------
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def _normalize_presented_key(x_api_key: Optional[str]) -> Optional[str]:
    if not x_api_key:
        return None
    key = x_api_key.strip()
    if key.lower().startswith("bearer "):
        key = key[7:].strip()
    return key or None


def _split_secrets(configured: str) -> list[str]:
    # Comma- or whitespace-separated, so keys can be rotated without downtime.
    parts = re.split(r"[,\s]+", configured.strip())
    return [p for p in parts if p]


def _is_valid_key(presented: str, configured: str) -> bool:
    return any(secrets.compare_digest(presented, candidate) for candidate in _split_secrets(configured))


def verify_gateway_key(settings: Settings, x_api_key: Optional[str]) -> None:
    """
    Decide whether identity headers on this request can be trusted.

    - API_SECRET set: a matching X-API-Key is required.
    - API_SECRET missing: development/testing trust the headers,
      production fails closed.
    """
    configured = settings.API_SECRET
    presented = _normalize_presented_key(x_api_key)

    if not configured:
        if settings.APP_ENV == AppEnv.PRODUCTION:
            logger.error("api_secret_missing")
            raise UnexpectedError("Server misconfiguration: API_SECRET is not set")
        return

    if not presented:
        raise UnauthorizedError("Missing X-API-Key header")
    if not _is_valid_key(presented, configured):
        raise ForbiddenError("Invalid X-API-Key credentials")


# -----------------------------------------------------------------------------
# Identity
# -----------------------------------------------------------------------------


def get_optional_actor(
    settings: Settings = Depends(get_settings_dep),
    x_user_id: Optional[str] = Header(None, description="Caller id asserted by the gateway."),
    x_user_role: Optional[str] = Header(None, description="'admin' or 'user'."),
    x_api_key: Optional[str] = Security(api_key_scheme),
) -> Optional[Actor]:
    user_id = (x_user_id or "").strip()
    if not user_id:
        return None

    verify_gateway_key(settings, x_api_key)

    role = Role.ADMIN if (x_user_role or "").strip().lower() == Role.ADMIN.value else Role.USER
    return Actor(user_id=user_id, role=role)


def get_actor(actor: Optional[Actor] = Depends(get_optional_actor)) -> Actor:
    if actor is None:
        raise UnauthorizedError("Authentication required")
    return actor


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        raise ForbiddenError("Admin access required")
    return actor


__all__ = [
    "get_container",
    "get_settings_dep",
    "get_session",
    "get_storage",
    "get_posts_service",
    "get_products_service",
    "get_taxonomy_service",
    "api_key_scheme",
    "verify_gateway_key",
    "get_optional_actor",
    "get_actor",
    "require_admin",
]
