# storefront_http_api/storage/s3.py

from __future__ import annotations

from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import UploadError
from ..logging import get_logger
from ..telemetry import get_tracer
from .base import DEFAULT_MAX_BYTES, StorageGateway

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class S3StorageGateway(StorageGateway):
    """
    Production storage adapter for any S3-compatible object store
    (AWS S3, Supabase Storage, MinIO).

    Buckets are expected to exist and to be publicly readable under
    ``public_base_url``. No retries: a failed call surfaces as UploadError.
    """

    def __init__(
        self,
        public_base_url: str,
        *,
        client=None,
        region_name: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        super().__init__(public_base_url, max_bytes=max_bytes)
        # Credentials fall back to boto3's own discovery (env, profile, IAM role).
        self.s3_client = client or boto3.client(
            "s3",
            region_name=region_name,
            endpoint_url=endpoint_url,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
        )

    def _put(self, bucket: str, path: str, data: bytes, content_type: str) -> None:
        with tracer.start_as_current_span("s3_upload") as span:
            span.set_attribute("s3.bucket", bucket)
            span.set_attribute("s3.key", path)
            try:
                self.s3_client.put_object(
                    Bucket=bucket,
                    Key=path,
                    Body=data,
                    ContentType=content_type,
                    CacheControl="max-age=3600",
                )
            except (ClientError, BotoCoreError) as exc:
                logger.error("storage_upload_failed", bucket=bucket, path=path, error=str(exc))
                raise UploadError(f"Upload failed: {exc}") from exc

        logger.info("storage_object_uploaded", bucket=bucket, path=path, size=len(data))

    def _remove(self, bucket: str, path: str) -> None:
        with tracer.start_as_current_span("s3_delete") as span:
            span.set_attribute("s3.bucket", bucket)
            span.set_attribute("s3.key", path)
            try:
                # S3 reports success for keys that do not exist.
                self.s3_client.delete_object(Bucket=bucket, Key=path)
            except ClientError as exc:
                if exc.response.get("Error", {}).get("Code") in ("404", "NoSuchKey"):
                    return
                raise UploadError(f"Delete failed: {exc}") from exc
            except BotoCoreError as exc:
                raise UploadError(f"Delete failed: {exc}") from exc

        logger.info("storage_object_deleted", bucket=bucket, path=path)

    def health_check(self) -> bool:
        try:
            self.s3_client.list_buckets()
        except (ClientError, BotoCoreError) as exc:
            logger.warning("storage_health_check_failed", backend="s3", error=str(exc))
            return False
        return True

    def close(self) -> None:
        close = getattr(self.s3_client, "close", None)
        if callable(close):
            close()


__all__ = ["S3StorageGateway"]
