# storefront_http_api/storage/filesystem.py

from __future__ import annotations

import os
from pathlib import Path

from ..errors import UploadError
from ..logging import get_logger
from .base import DEFAULT_MAX_BYTES, StorageGateway

logger = get_logger(__name__)


class FileSystemStorageGateway(StorageGateway):
    """
    Local-directory storage for development: ``<root>/<bucket>/<path>``.

    The app mounts ``root`` as static files so the public URLs resolve.
    """

    def __init__(self, root: str, public_base_url: str, *, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        super().__init__(public_base_url, max_bytes=max_bytes)
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _target(self, bucket: str, path: str) -> Path:
        target = (self.root / bucket / path).resolve()
        bucket_root = (self.root / bucket).resolve()
        if bucket_root not in target.parents:
            raise UploadError(f"Invalid storage path: {path!r}")
        return target

    def _put(self, bucket: str, path: str, data: bytes, content_type: str) -> None:
        target = self._target(bucket, path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.error("storage_upload_failed", bucket=bucket, path=path, error=str(exc))
            raise UploadError(f"Upload failed: {exc}") from exc
        logger.info("storage_object_uploaded", bucket=bucket, path=path, size=len(data))

    def _remove(self, bucket: str, path: str) -> None:
        target = self._target(bucket, path)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise UploadError(f"Delete failed: {exc}") from exc
        logger.info("storage_object_deleted", bucket=bucket, path=path)

    def health_check(self) -> bool:
        return self.root.exists() and os.access(self.root, os.W_OK)


__all__ = ["FileSystemStorageGateway"]
