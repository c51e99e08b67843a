"""S3-backed implementation of ObjectStore."""

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from media_assets.infrastructure.adapters.s3_adapter import S3AdapterProtocol
from media_assets.models.asset import FileInfo
from media_assets.models.errors import NotFoundError, StoreError
from media_assets.repositories.object_store import ObjectStore
from media_assets.utils.constants import (
    DEFAULT_OPERATION_TIMEOUT,
    ERROR_CODE_STORE_DELETE_FAILED,
    ERROR_CODE_STORE_HEAD_FAILED,
    ERROR_CODE_STORE_PUT_FAILED,
    ERROR_CODE_STORE_TIMEOUT,
)

logger = Logger(UTC=True)

T = TypeVar("T")

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ObjectStore(ObjectStore):
    """Object store backed by an S3-compatible bucket.

    boto3 calls are blocking, so each one runs on a worker thread and is
    bounded by `operation_timeout`. A timed-out call is abandoned, not
    cancelled; the thread finishes on its own.
    """

    def __init__(
        self,
        adapter: S3AdapterProtocol,
        *,
        operation_timeout: float = DEFAULT_OPERATION_TIMEOUT,
    ) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter
        self._timeout = operation_timeout

    async def _call(self, func: Callable[..., T], **kwargs: Any) -> T:
        return await asyncio.wait_for(
            asyncio.to_thread(func, **kwargs),
            timeout=self._timeout,
        )

    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        cache_control: str,
    ) -> None:
        """Upload object bytes under `key`."""
        logger.debug(
            "Storing object",
            extra={"key": key, "size": len(data), "content_type": content_type},
        )

        try:
            await self._call(
                self._s3.put_object,
                key=key,
                body=data,
                content_type=content_type,
                cache_control=cache_control,
            )
            logger.info("Object stored successfully", extra={"key": key})

        except asyncio.TimeoutError as exc:
            logger.error("Object store put timed out", extra={"key": key})
            raise StoreError(
                message="Image storage did not respond in time",
                error_code=ERROR_CODE_STORE_TIMEOUT,
                details={"key": key, "operation": "put"},
            ) from exc

        except ClientError as exc:
            logger.error(
                "Object store put failed",
                extra={"key": key, "error_code": _error_code(exc)},
            )
            raise StoreError(
                message="Unable to store image at this time",
                error_code=ERROR_CODE_STORE_PUT_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error storing object")
            raise StoreError(
                message="Unable to store image at this time",
                error_code=ERROR_CODE_STORE_PUT_FAILED,
                details={"key": key},
            ) from exc

    async def delete(self, key: str) -> None:
        """Delete an object; a missing key counts as deleted."""
        logger.debug("Deleting object", extra={"key": key})

        try:
            await self._call(self._s3.delete_object, key=key)
            logger.info("Object deleted successfully", extra={"key": key})

        except asyncio.TimeoutError as exc:
            logger.error("Object store delete timed out", extra={"key": key})
            raise StoreError(
                message="Image storage did not respond in time",
                error_code=ERROR_CODE_STORE_TIMEOUT,
                details={"key": key, "operation": "delete"},
            ) from exc

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                logger.info("Object already absent", extra={"key": key})
                return

            logger.error(
                "Object store delete failed",
                extra={"key": key, "error_code": _error_code(exc)},
            )
            raise StoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_STORE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting object")
            raise StoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_STORE_DELETE_FAILED,
                details={"key": key},
            ) from exc

    async def head(self, key: str) -> FileInfo:
        """Return size, modification time and content type of an object."""
        logger.debug("Fetching object metadata", extra={"key": key})

        try:
            response = await self._call(self._s3.head_object, key=key)

        except asyncio.TimeoutError as exc:
            logger.error("Object store head timed out", extra={"key": key})
            raise StoreError(
                message="Image storage did not respond in time",
                error_code=ERROR_CODE_STORE_TIMEOUT,
                details={"key": key, "operation": "head"},
            ) from exc

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise NotFoundError(
                    message="Image not found",
                    details={"key": key},
                ) from exc

            logger.error(
                "Object store head failed",
                extra={"key": key, "error_code": _error_code(exc)},
            )
            raise StoreError(
                message="Unable to read image metadata",
                error_code=ERROR_CODE_STORE_HEAD_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching object metadata")
            raise StoreError(
                message="Unable to read image metadata",
                error_code=ERROR_CODE_STORE_HEAD_FAILED,
                details={"key": key},
            ) from exc

        return FileInfo(
            size_bytes=int(response.get("ContentLength", 0)),
            last_modified=response.get("LastModified"),
            content_type=response.get("ContentType"),
        )

    def close(self) -> None:
        """Release the adapter's connection pool."""
        self._s3.close()
