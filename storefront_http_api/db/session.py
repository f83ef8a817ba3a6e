# storefront_http_api/db/session.py

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..logging import get_logger
from .models import Base

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Engine / Session factory
# ---------------------------------------------------------------------------


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for ``database_url``.

    SQLite needs ``check_same_thread=False`` under a threaded ASGI server and
    explicit foreign-key enforcement. In-memory SQLite shares a single
    connection so every session sees the same database.
    """
    options: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True

    engine = create_engine(database_url, echo=echo, future=True, **options)

    if database_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine(
    database_url: str,
    *,
    echo: bool = False,
    create_tables: bool = False,
) -> Iterator[Engine]:
    """
    Container resource: yield an engine and dispose of it on shutdown.
    """
    engine = build_engine(database_url, echo=echo)
    if create_tables:
        Base.metadata.create_all(engine)
    logger.info("database_engine_ready", dialect=engine.dialect.name)
    try:
        yield engine
    finally:
        engine.dispose()
        logger.info("database_engine_disposed")


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        class_=Session,
    )


# ---------------------------------------------------------------------------
# Request / script helpers
# ---------------------------------------------------------------------------


def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """
    FastAPI-style dependency body: one session per request, always closed.

    Services commit explicitly; anything left uncommitted is rolled back on
    close.
    """
    db = factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def db_session(factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Context manager for non-request usage (seed script, maintenance).

        with db_session(factory) as db:
            ...
    """
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


__all__ = [
    "build_engine",
    "init_engine",
    "build_session_factory",
    "session_scope",
    "db_session",
]
