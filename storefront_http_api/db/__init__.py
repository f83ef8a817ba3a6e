"""
storefront_http_api.db
======================

Database package: ORM models plus engine/session helpers.

    from storefront_http_api.db import Base, build_engine, build_session_factory
"""

from .models import Base
from .session import build_engine, build_session_factory, db_session, init_engine, session_scope

__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "db_session",
    "init_engine",
    "session_scope",
]
