# storefront_http_api/routers/uploads.py

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, File, Query, UploadFile

from storefront_http_api.auth import Actor
from storefront_http_api.config import Settings
from storefront_http_api.dependencies import get_settings_dep, get_storage, require_admin
from storefront_http_api.logging import get_logger
from storefront_http_api.schemas.common import Envelope
from storefront_http_api.schemas.products import UploadedImage
from storefront_http_api.storage import StorageGateway

from .forms import read_upload

logger = get_logger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


class UploadTarget(str, Enum):
    POSTS = "posts"
    PRODUCTS = "products"


@router.post(
    "/images",
    response_model=Envelope[UploadedImage],
    summary="Upload a standalone image",
    description="Stores one image in the posts or products bucket and returns its public URL.",
)
async def upload_image(
    image: UploadFile = File(...),
    bucket: UploadTarget = Query(UploadTarget.POSTS),
    _admin: Actor = Depends(require_admin),
    storage: StorageGateway = Depends(get_storage),
    settings: Settings = Depends(get_settings_dep),
) -> Envelope[UploadedImage]:
    target = settings.POSTS_BUCKET if bucket == UploadTarget.POSTS else settings.PRODUCTS_BUCKET
    incoming = await read_upload(image, settings.MAX_UPLOAD_BYTES)
    stored = storage.upload_file(incoming, target)
    logger.info("image_uploaded", bucket=target, path=stored.path, size=incoming.size)
    return Envelope(data=UploadedImage(url=stored.url, path=stored.path))
