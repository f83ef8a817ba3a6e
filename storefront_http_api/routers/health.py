# storefront_http_api/routers/health.py

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront_http_api.dependencies import get_session, get_storage
from storefront_http_api.logging import get_logger
from storefront_http_api.storage import StorageGateway

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["system"])


@router.get("/live", summary="Liveness probe")
def live() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/ready", summary="Readiness probe")
def ready(
    session: Session = Depends(get_session),
    storage: StorageGateway = Depends(get_storage),
) -> JSONResponse:
    """
    Checks the database connection and the storage backend.
    """
    checks = {"database": "ok", "storage": "ok"}

    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("readiness_database_failed", error=str(exc))
        checks["database"] = "unavailable"

    if not storage.health_check():
        checks["storage"] = "unavailable"

    ok = all(value == "ok" for value in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": ok, "data": {"status": "ok" if ok else "degraded", "checks": checks}},
    )
