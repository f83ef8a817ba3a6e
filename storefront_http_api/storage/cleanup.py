# storefront_http_api/storage/cleanup.py

"""
Best-effort object removal.

Used wherever a stored image must go away but its failure must never block
the owning mutation: cascade deletes, image replacement, and rolling back
uploads after a failed database write.
"""

from __future__ import annotations

from typing import Iterable

from ..errors import DomainError
from ..logging import get_logger
from .base import StorageGateway

logger = get_logger(__name__)


def discard_objects(
    gateway: StorageGateway,
    bucket: str,
    urls: Iterable[str],
    *,
    reason: str,
) -> int:
    """
    Delete each object behind ``urls``; log and continue on failure.

    Returns the number of objects removed. Never raises.
    """
    removed = 0
    for url in urls:
        if not url:
            continue
        path = gateway.path_from_url(url, bucket)
        if not path:
            logger.warning("storage_cleanup_skipped", bucket=bucket, url=url, reason=reason)
            continue
        try:
            gateway.delete(path, bucket)
        except DomainError as exc:
            logger.warning(
                "storage_delete_failed", bucket=bucket, path=path, reason=reason, error=exc.message
            )
            continue
        except Exception as exc:  # noqa: BLE001 - cleanup must not fail the caller
            logger.error(
                "storage_delete_failed", bucket=bucket, path=path, reason=reason, error=str(exc)
            )
            continue
        removed += 1
    return removed


__all__ = ["discard_objects"]
