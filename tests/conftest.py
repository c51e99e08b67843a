"""
Pytest configuration and fixtures for media asset tests.
Provides AWS mocking, S3 fixtures with proper cleanup, an in-memory
object store double and in-memory test images.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from io import BytesIO
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from media_assets.config import StorageSettings
from media_assets.infrastructure.adapters.s3_adapter import S3Adapter
from media_assets.models.asset import FileInfo
from media_assets.models.errors import NotFoundError, StoreError
from media_assets.models.upload import UploadFile
from media_assets.repositories.object_store import ObjectStore
from media_assets.services.lifecycle import AssetLifecycleManager
from media_assets.services.urls import UrlResolver

TEST_BUCKET = "test-media"
TEST_ACCOUNT = "testaccount"
TEST_DOMAIN = "cdn.example.com"
TEST_REGION = "us-east-1"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so no test can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)


@pytest.fixture
def storage_settings() -> StorageSettings:
    return StorageSettings(
        account_id=TEST_ACCOUNT,
        access_key_id="testing",
        secret_access_key="testing",
        bucket_name=TEST_BUCKET,
    )


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=TEST_REGION)


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    try:
        s3_client.head_bucket(Bucket=TEST_BUCKET)
    except ClientError:
        s3_client.create_bucket(Bucket=TEST_BUCKET)

    yield s3_client

    _cleanup_s3_objects(s3_client, TEST_BUCKET)


@pytest.fixture
def s3_adapter(s3_bucket, storage_settings) -> S3Adapter:
    """Adapter bound to the moto-backed client."""
    return S3Adapter(storage_settings, client=s3_bucket)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[[str, bytes, str], dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("tours/abc.webp", image_bytes, "image/webp")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_client.put_object(
            Bucket=TEST_BUCKET, Key=key, Body=body, ContentType=content_type
        )

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], dict[str, Any]]:
    """
    Helper to get an object (body and headers) from S3.

    Usage:
        response = s3_get_object("tours/abc.webp")
    """

    def _get(key: str) -> dict[str, Any]:
        response: dict[str, Any] = s3_client.get_object(Bucket=TEST_BUCKET, Key=key)
        return {**response, "Body": response["Body"].read()}

    return _get


class InMemoryObjectStore(ObjectStore):
    """Object store double recording every call.

    Failures are injected per operation via `fail_put`, `fail_delete` and
    `fail_head` (sets of keys, or the "*" wildcard).
    """

    def __init__(self) -> None:
        self.objects: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_put: set[str] = set()
        self.fail_delete: set[str] = set()
        self.fail_head: set[str] = set()

    @staticmethod
    def _fails(key: str, keys: set[str]) -> bool:
        return "*" in keys or key in keys

    def calls_for(self, operation: str) -> list[str]:
        return [key for op, key in self.calls if op == operation]

    async def put(self, key: str, data: bytes, *, content_type: str, cache_control: str) -> None:
        self.calls.append(("put", key))
        if self._fails(key, self.fail_put):
            raise StoreError(message="Unable to store image at this time", details={"key": key})
        self.objects[key] = {
            "data": data,
            "content_type": content_type,
            "cache_control": cache_control,
            "last_modified": datetime.now(timezone.utc),
        }

    async def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        if self._fails(key, self.fail_delete):
            raise StoreError(message="Unable to delete image at this time", details={"key": key})
        self.objects.pop(key, None)

    async def head(self, key: str) -> FileInfo:
        self.calls.append(("head", key))
        if self._fails(key, self.fail_head):
            raise StoreError(message="Unable to read image metadata", details={"key": key})
        if key not in self.objects:
            raise NotFoundError(message="Image not found", details={"key": key})
        stored = self.objects[key]
        return FileInfo(
            size_bytes=len(stored["data"]),
            last_modified=stored["last_modified"],
            content_type=stored["content_type"],
        )


@pytest.fixture
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def domain_resolver() -> UrlResolver:
    return UrlResolver(public_domain=TEST_DOMAIN, bucket_name=TEST_BUCKET, account_id=TEST_ACCOUNT)


@pytest.fixture
def canonical_resolver() -> UrlResolver:
    return UrlResolver(bucket_name=TEST_BUCKET, account_id=TEST_ACCOUNT)


@pytest.fixture
def manager(memory_store, domain_resolver) -> AssetLifecycleManager:
    return AssetLifecycleManager(memory_store, domain_resolver)


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory producing encoded test images.

    Usage:
        data = make_image(1200, 900, "JPEG")
    """

    def _make(
        width: int = 64,
        height: int = 48,
        fmt: str = "JPEG",
        mode: str = "RGB",
    ) -> bytes:
        color: Any = (200, 80, 40, 128) if mode == "RGBA" else (200, 80, 40)
        if mode == "P":
            color = 1
        elif mode == "L":
            color = 128
        image = Image.new(mode, (width, height), color)
        buffer = BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def jpeg_upload(make_image) -> UploadFile:
    """A 1200x900 JPEG upload descriptor."""
    return UploadFile.from_bytes(make_image(1200, 900, "JPEG"), "image/jpeg", "tour.jpg")


@pytest.fixture
def png_upload(make_image) -> UploadFile:
    return UploadFile.from_bytes(make_image(300, 200, "PNG", "RGBA"), "image/png", "logo.png")
