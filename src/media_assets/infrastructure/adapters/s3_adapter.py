"""Thin adapter for interacting with an S3-compatible object store."""

from collections.abc import Mapping
from typing import Any, Protocol

import boto3
from botocore.config import Config

from media_assets.config import StorageSettings


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (store-facing only)."""

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
        CacheControl: str,
    ) -> Any: ...

    def delete_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Any: ...

    def head_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def close(self) -> None: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        cache_control: str,
    ) -> None: ...

    def delete_object(self, *, key: str) -> None: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def close(self) -> None: ...


def build_client_config(settings: StorageSettings) -> Config:
    """botocore config with finite timeouts and no automatic retries."""
    return Config(
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
        retries={"max_attempts": 1, "mode": "standard"},
        s3={"addressing_style": "path"},
    )


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(
        self,
        settings: StorageSettings,
        client: _Boto3S3Client | None = None,
    ) -> None:
        """Create S3 client from storage settings."""
        self._bucket = settings.bucket_name
        self._client: _Boto3S3Client = client or boto3.client(
            "s3",
            endpoint_url=settings.api_endpoint,
            region_name=settings.region,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key,
            config=build_client_config(settings),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        cache_control: str,
    ) -> None:
        """Store object in the bucket.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            CacheControl=cache_control,
        )

    def delete_object(self, *, key: str) -> None:
        """Delete object from the bucket.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(
            Bucket=self._bucket,
            Key=key,
        )

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object metadata.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.head_object(
            Bucket=self._bucket,
            Key=key,
        )

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()
