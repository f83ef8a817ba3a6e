# storefront_http_api/storage/base.py

"""
Object-storage port.

``StorageGateway`` owns everything that is independent of the backend:
content-type and size checks, collision-free object naming, and the
translation between public URLs and storage-relative paths. Backends only
implement ``_put``, ``_remove`` and ``health_check``.
"""

from __future__ import annotations

import mimetypes
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import quote, unquote, urlsplit

from ..errors import UploadError
from ..slugs import slugify
from ..telemetry import get_tracer

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

DEFAULT_MAX_BYTES = 5 * 1024 * 1024

tracer = get_tracer(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file, detached from the web framework."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoredObject:
    url: str
    path: str


def _megabytes(size: int) -> str:
    value = size / (1024 * 1024)
    return f"{value:g}MB"


def file_too_large(limit: int) -> UploadError:
    return UploadError(f"File too large. Maximum size is {_megabytes(limit)}.")


class StorageGateway(ABC):
    """
    Upload/delete images in named buckets and map URLs back to paths.
    """

    def __init__(self, public_base_url: str, *, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.public_base_url = public_base_url.rstrip("/")
        self.max_bytes = max_bytes

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _put(self, bucket: str, path: str, data: bytes, content_type: str) -> None:
        """Store ``data`` under ``bucket/path``. Raise UploadError on failure."""

    @abstractmethod
    def _remove(self, bucket: str, path: str) -> None:
        """Remove ``bucket/path``; absent objects are not an error."""

    @abstractmethod
    def health_check(self) -> bool:
        """Return True when the backend is reachable."""

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(self, content_type: str, size: int, *, max_bytes: Optional[int] = None) -> None:
        """
        Reject anything that is not a supported image within the size limit.
        """
        limit = max_bytes if max_bytes is not None else self.max_bytes
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise UploadError("Only image files (JPEG, PNG, GIF, WebP) are allowed!")
        if size <= 0:
            raise UploadError("Uploaded file is empty.")
        if size > limit:
            raise file_too_large(limit)

    def object_name(self, desired_name: str, content_type: str) -> str:
        """
        ``summer-hat.png`` -> ``summer-hat-1718000000000-9f2c4e1a.png``.
        """
        pure = PurePosixPath((desired_name or "").replace("\\", "/")).name
        suffix = PurePosixPath(pure).suffix.lower()
        stem = pure[: -len(suffix)] if suffix else pure
        if not suffix or mimetypes.guess_type(f"x{suffix}")[0] != content_type:
            suffix = _EXTENSIONS.get(content_type) or mimetypes.guess_extension(content_type) or ""
        token = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"
        return f"{slugify(stem, fallback='image')}-{token}{suffix}"

    def upload(
        self,
        data: bytes,
        content_type: str,
        bucket: str,
        desired_name: str,
        *,
        max_bytes: Optional[int] = None,
    ) -> StoredObject:
        self.validate(content_type, len(data), max_bytes=max_bytes)
        path = self.object_name(desired_name, content_type)
        with tracer.start_as_current_span("storage_upload") as span:
            span.set_attribute("storage.bucket", bucket)
            span.set_attribute("storage.size", len(data))
            self._put(bucket, path, data, content_type)
        return StoredObject(url=self.public_url(path, bucket), path=path)

    def upload_file(self, file: IncomingFile, bucket: str, *, max_bytes: Optional[int] = None) -> StoredObject:
        return self.upload(file.data, file.content_type, bucket, file.filename, max_bytes=max_bytes)

    def delete(self, path: str, bucket: str) -> bool:
        """
        Remove an object. Idempotent: True whether or not it existed.
        """
        if not path:
            raise UploadError("Cannot delete an object without a path.")
        with tracer.start_as_current_span("storage_delete") as span:
            span.set_attribute("storage.bucket", bucket)
            self._remove(bucket, path)
        return True

    def public_url(self, path: str, bucket: str) -> str:
        return f"{self.public_base_url}/{quote(bucket)}/{quote(path)}"

    def path_from_url(self, url: str, bucket: Optional[str] = None) -> str:
        """
        Extract the storage-relative path from a public URL.

        ``<public base>/<bucket>/<path>`` -> ``<path>``. Returns "" for anything
        that does not parse, does not live under the public base URL, or (when
        ``bucket`` is given) belongs to a different bucket.
        """
        try:
            parts = urlsplit(url or "")
            base = urlsplit(self.public_base_url)
        except (TypeError, ValueError):
            return ""

        if not parts.scheme or not parts.netloc:
            return ""
        if (parts.scheme, parts.netloc) != (base.scheme, base.netloc):
            return ""

        prefix = base.path.rstrip("/") + "/"
        if not parts.path.startswith(prefix):
            return ""

        remainder = parts.path[len(prefix):]
        url_bucket, _, path = remainder.partition("/")
        if bucket is not None and unquote(url_bucket) != bucket:
            return ""
        return unquote(path)


__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "DEFAULT_MAX_BYTES",
    "IncomingFile",
    "StoredObject",
    "StorageGateway",
    "file_too_large",
]
