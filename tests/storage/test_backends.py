# tests/storage/test_backends.py
import boto3
import pytest
from botocore.stub import ANY, Stubber

from storefront_http_api.config import Settings, StorageBackend
from storefront_http_api.errors import UploadError
from storefront_http_api.storage import (
    FileSystemStorageGateway,
    S3StorageGateway,
    build_storage_gateway,
)
from tests.conftest import PNG

S3_BASE = "https://project.supabase.test/storage/v1/object/public"


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------


class TestFileSystemGateway:
    @pytest.fixture
    def gateway(self, tmp_path):
        return FileSystemStorageGateway(str(tmp_path), "http://localhost:8000/media")

    def test_upload_writes_bytes_under_bucket(self, gateway, tmp_path):
        stored = gateway.upload(PNG, "image/png", "blog-images", "cover.png")

        target = tmp_path / "blog-images" / stored.path
        assert target.read_bytes() == PNG
        assert stored.url == f"http://localhost:8000/media/blog-images/{stored.path}"

    def test_delete_removes_file_and_tolerates_absence(self, gateway, tmp_path):
        stored = gateway.upload(PNG, "image/png", "blog-images", "cover.png")

        assert gateway.delete(stored.path, "blog-images") is True
        assert not (tmp_path / "blog-images" / stored.path).exists()
        assert gateway.delete(stored.path, "blog-images") is True

    def test_paths_cannot_escape_the_bucket(self, gateway):
        with pytest.raises(UploadError):
            gateway.delete("../outside.png", "blog-images")

    def test_health_check(self, gateway):
        assert gateway.health_check() is True


# ---------------------------------------------------------------------------
# S3
# ---------------------------------------------------------------------------


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )


class TestS3Gateway:
    def test_upload_puts_object_with_content_type(self, s3_client):
        gateway = S3StorageGateway(S3_BASE, client=s3_client)
        with Stubber(s3_client) as stubber:
            stubber.add_response(
                "put_object",
                {},
                {
                    "Bucket": "product-images",
                    "Key": ANY,
                    "Body": PNG,
                    "ContentType": "image/png",
                    "CacheControl": "max-age=3600",
                },
            )
            stored = gateway.upload(PNG, "image/png", "product-images", "lamp.png")
            stubber.assert_no_pending_responses()

        assert stored.url == f"{S3_BASE}/product-images/{stored.path}"
        assert gateway.path_from_url(stored.url) == stored.path

    def test_upload_transport_failure_is_upload_error(self, s3_client):
        gateway = S3StorageGateway(S3_BASE, client=s3_client)
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
            with pytest.raises(UploadError, match="Upload failed"):
                gateway.upload(PNG, "image/png", "product-images", "lamp.png")

    def test_invalid_type_never_reaches_s3(self, s3_client):
        gateway = S3StorageGateway(S3_BASE, client=s3_client)
        with Stubber(s3_client) as stubber:
            with pytest.raises(UploadError):
                gateway.upload(b"%PDF", "application/pdf", "product-images", "doc.pdf")
            stubber.assert_no_pending_responses()

    def test_delete_of_missing_key_succeeds(self, s3_client):
        gateway = S3StorageGateway(S3_BASE, client=s3_client)
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("delete_object", service_error_code="NoSuchKey", http_status_code=404)
            assert gateway.delete("gone.png", "product-images") is True

    def test_delete_failure_is_upload_error(self, s3_client):
        gateway = S3StorageGateway(S3_BASE, client=s3_client)
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)
            with pytest.raises(UploadError, match="Delete failed"):
                gateway.delete("lamp.png", "product-images")

    def test_health_check_reports_failure(self, s3_client):
        gateway = S3StorageGateway(S3_BASE, client=s3_client)
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("list_buckets", service_error_code="AccessDenied", http_status_code=403)
            assert gateway.health_check() is False


def test_build_storage_gateway_selects_backend(tmp_path):
    fs = build_storage_gateway(
        Settings(_env_file=None, STORAGE_BACKEND=StorageBackend.FILESYSTEM, FILESYSTEM_STORAGE_PATH=str(tmp_path))
    )
    s3 = build_storage_gateway(
        Settings(
            _env_file=None,
            STORAGE_BACKEND=StorageBackend.S3,
            STORAGE_PUBLIC_BASE_URL=S3_BASE,
            AWS_ACCESS_KEY_ID="test",
            AWS_SECRET_ACCESS_KEY="test",
        )
    )

    assert isinstance(fs, FileSystemStorageGateway)
    assert isinstance(s3, S3StorageGateway)
    assert s3.public_base_url == S3_BASE
