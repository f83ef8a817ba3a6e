"""
storefront_http_api.storage
===========================

Object storage for uploaded images.

    from storefront_http_api.storage import StorageGateway, build_storage_gateway
"""

from __future__ import annotations

from typing import Iterator

from ..config import Settings, StorageBackend
from ..logging import get_logger
from .base import ALLOWED_IMAGE_TYPES, IncomingFile, StorageGateway, StoredObject, file_too_large
from .cleanup import discard_objects
from .filesystem import FileSystemStorageGateway
from .s3 import S3StorageGateway

logger = get_logger(__name__)


def build_storage_gateway(settings: Settings) -> StorageGateway:
    """
    Construct the gateway selected by ``STORAGE_BACKEND``.
    """
    if settings.STORAGE_BACKEND == StorageBackend.S3:
        return S3StorageGateway(
            settings.STORAGE_PUBLIC_BASE_URL,
            region_name=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            max_bytes=settings.MAX_UPLOAD_BYTES,
        )
    return FileSystemStorageGateway(
        settings.FILESYSTEM_STORAGE_PATH,
        settings.STORAGE_PUBLIC_BASE_URL,
        max_bytes=settings.MAX_UPLOAD_BYTES,
    )


def init_storage_gateway(settings: Settings) -> Iterator[StorageGateway]:
    """
    Container resource: yield the gateway and close it on shutdown.
    """
    gateway = build_storage_gateway(settings)
    logger.info("storage_gateway_ready", backend=settings.STORAGE_BACKEND.value)
    try:
        yield gateway
    finally:
        gateway.close()


__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "IncomingFile",
    "StoredObject",
    "StorageGateway",
    "FileSystemStorageGateway",
    "S3StorageGateway",
    "build_storage_gateway",
    "init_storage_gateway",
    "discard_objects",
    "file_too_large",
]
