# storefront_http_api/main.py

"""
Entry point for the storefront HTTP API.

This module creates the FastAPI application, wires up middleware and error
handling, and mounts every router under the configured API prefix.

Intended usage:
    uvicorn storefront_http_api.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional
from urllib.parse import urlsplit

from dependency_injector import providers
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront_http_api import __version__
from storefront_http_api.config import AppEnv, Settings, StorageBackend
from storefront_http_api.container import Container
from storefront_http_api.errors import DomainError
from storefront_http_api.logging import configure_logging, get_logger
from storefront_http_api.routers import health, posts, products, taxonomy, uploads
from storefront_http_api.telemetry import instrument_fastapi, setup_telemetry

logger = get_logger(__name__)


def _error_body(message: str, *, error: Optional[str] = None, data: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return body


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message, code=exc.code)
        else:
            logger.info("request_rejected", path=request.url.path, error=exc.message, code=exc.code)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, error=exc.code, data=exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body",
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Validation failed", error="validation_error", data={"errors": errors}),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Unhandled errors never leak details unless DEBUG is on.
        """
        logger.exception("unhandled_exception", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Server error", error=str(exc) if settings.DEBUG else None),
        )


def _mount_media(app: FastAPI, settings: Settings) -> None:
    """
    Serve the filesystem storage backend under the path of its public URL.
    """
    if settings.STORAGE_BACKEND != StorageBackend.FILESYSTEM:
        return
    mount_path = urlsplit(settings.STORAGE_PUBLIC_BASE_URL).path.rstrip("/") or "/media"
    app.mount(
        mount_path,
        StaticFiles(directory=settings.FILESYSTEM_STORAGE_PATH, check_dir=False),
        name="media",
    )


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    container: Optional[Container] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    A container may be passed in (tests override its providers); otherwise a
    fresh one is built around ``settings``.
    """
    container = container or Container()
    if settings is not None:
        container.settings.override(providers.Object(settings))
    settings = container.settings()

    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_telemetry(settings)
        container.init_resources()
        logger.info(
            "app_started",
            app=settings.APP_NAME,
            env=settings.APP_ENV.value,
            api_prefix=settings.api_prefix,
            storage=settings.STORAGE_BACKEND.value,
        )
        try:
            yield
        finally:
            container.shutdown_resources()
            logger.info("app_stopped", app=settings.APP_NAME)

    docs_enabled = settings.APP_ENV != AppEnv.PRODUCTION
    app = FastAPI(
        title="Storefront Publishing API",
        version=__version__,
        description="Blog and product catalog with comments, likes and reviews.",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    instrument_fastapi(app, settings)
    _register_exception_handlers(app, settings)

    prefix = settings.api_prefix
    app.include_router(posts.router, prefix=prefix)
    app.include_router(products.router, prefix=prefix)
    app.include_router(taxonomy.router, prefix=prefix)
    app.include_router(uploads.router, prefix=prefix)
    app.include_router(health.router)

    _mount_media(app, settings)
    return app


# Entry point for Uvicorn
app = create_app()
