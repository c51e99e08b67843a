"""Business logic for the media asset lifecycle.

This module coordinates validation, transcoding, storage and URL
resolution for image uploads, and the best-effort reverse path for
deletions, while translating failures into domain-specific errors.
"""

import asyncio
from collections.abc import Iterable, Sequence

from aws_lambda_powertools import Logger

from media_assets.models.asset import (
    BatchDeleteReport,
    DeleteOutcome,
    DeleteStatus,
    FileInfo,
    ResponsiveImageUrls,
)
from media_assets.models.errors import (
    ConfigurationError,
    GalleryLimitError,
    MediaAssetError,
    NotFoundError,
    StoreError,
    TranscodeError,
    UploadError,
    ValidationError,
)
from media_assets.models.upload import UploadFile
from media_assets.repositories.object_store import ObjectStore
from media_assets.services.keys import build_key, new_key, new_unique_id
from media_assets.services.transcoder import transcode_async
from media_assets.services.urls import UrlResolver
from media_assets.services.validator import validate_image
from media_assets.services.variants import generate_variants
from media_assets.utils.constants import (
    CACHE_CONTROL_IMMUTABLE,
    DEFAULT_MAX_DIMENSION,
    MAX_GALLERY_ITEMS,
    OUTPUT_CONTENT_TYPE,
    VARIANT_SPECS,
)

logger = Logger(UTC=True)

_UPLOAD_FAILURE_MESSAGES: dict[type[MediaAssetError], str] = {
    TranscodeError: "Image upload failed: the image could not be processed",
    StoreError: "Image upload failed: the image could not be stored",
    ConfigurationError: "Image upload failed: image storage is misconfigured",
}


def _error_label(exc: Exception) -> str:
    return exc.error_code if isinstance(exc, MediaAssetError) else type(exc).__name__


def _wrap_upload_failure(exc: Exception, *, folder: str) -> UploadError:
    """Translate a post-validation failure into an UploadError."""
    message = "Image upload failed"
    for error_type, text in _UPLOAD_FAILURE_MESSAGES.items():
        if isinstance(exc, error_type):
            message = text
            break

    return UploadError(
        message=message,
        cause=exc,
        details={"folder": folder, "cause": _error_label(exc)},
    )


class AssetLifecycleManager:
    """Application service responsible for image assets.

    This service orchestrates:
    - Validation of incoming files
    - WebP transcoding and responsive variant generation
    - Storing objects under freshly generated keys
    - Resolving public URLs and reversing them for deletion

    It keeps no registry of issued keys; callers persist the returned URLs.
    """

    def __init__(self, store: ObjectStore, resolver: UrlResolver) -> None:
        self.store = store
        self.resolver = resolver

    async def _store_rendition(self, data: bytes, key: str) -> str:
        # URL first: a configuration defect must fail before anything is written
        url = self.resolver.build_url(key)
        await self.store.put(
            key,
            data,
            content_type=OUTPUT_CONTENT_TYPE,
            cache_control=CACHE_CONTROL_IMMUTABLE,
        )
        return url

    async def upload_image(self, file: UploadFile, folder: str) -> str:
        """Validate, transcode and store one image.

        The upload flow is:
        1. Validate MIME type and size
        2. Transcode to WebP bounded by 2000px
        3. Generate a fresh key under `folder`
        4. Store the object and return its public URL

        Args:
            file: Uploaded file descriptor
            folder: Logical namespace, e.g. "tours" or "services/<id>/gallery"

        Returns:
            Public URL of the stored image

        Raises:
            ValidationError: If the file or folder is rejected
            UploadError: If transcoding, storage or URL resolution fails
        """
        logger.debug(
            "Starting image upload",
            extra={"folder": folder, "mime_type": file.mimetype, "size": file.size},
        )

        validate_image(file)
        key = new_key(folder)

        try:
            data = await transcode_async(file.buffer, DEFAULT_MAX_DIMENSION)
            url = await self._store_rendition(data, key)

        except Exception as exc:
            logger.exception(
                "Image upload failed",
                extra={"folder": folder, "key": key, "error": _error_label(exc)},
            )
            raise _wrap_upload_failure(exc, folder=folder) from exc

        logger.info("Image uploaded successfully", extra={"key": key, "url": url})
        return url

    async def upload_responsive_image(self, file: UploadFile, folder: str) -> ResponsiveImageUrls:
        """Store thumb/medium/large/original renditions of one image.

        All four variants share one unique id and differ by suffix.
        The batch is all-or-nothing: any failed variant fails the call.

        Raises:
            ValidationError: If the file or folder is rejected
            UploadError: If any variant fails to transcode, store or resolve
        """
        logger.debug("Starting responsive image upload", extra={"folder": folder})

        validate_image(file)
        unique_id = new_unique_id()
        keys = {name: build_key(folder, unique_id, name) for name, _ in VARIANT_SPECS}

        try:
            # Fail on missing domain configuration before rendering or storing
            self.resolver.build_url(keys[VARIANT_SPECS[0][0]])

            batch = await generate_variants(file.buffer, VARIANT_SPECS)
            urls = await asyncio.gather(
                *(self._store_rendition(data, keys[name]) for name, data in batch.rendered)
            )

        except Exception as exc:
            logger.exception(
                "Responsive image upload failed",
                extra={"folder": folder, "unique_id": unique_id, "error": _error_label(exc)},
            )
            raise _wrap_upload_failure(exc, folder=folder) from exc

        result = ResponsiveImageUrls(
            **{name: url for (name, _), url in zip(batch.rendered, urls)}
        )
        logger.info(
            "Responsive image uploaded successfully",
            extra={"folder": folder, "unique_id": unique_id},
        )
        return result

    async def upload_multiple_images(self, files: Sequence[UploadFile], folder: str) -> list[str]:
        """Upload several images concurrently; all-or-nothing.

        Already-stored images are not cleaned up when a sibling fails.

        Returns:
            Public URLs in the same order as `files`

        Raises:
            ValidationError: If any file or the folder is rejected
            UploadError: If any upload fails after validation
        """
        logger.debug(
            "Starting multiple image upload",
            extra={"folder": folder, "count": len(files)},
        )

        # Reject the whole batch before any object is written
        for file in files:
            validate_image(file)

        try:
            urls = await asyncio.gather(*(self.upload_image(file, folder) for file in files))
        except MediaAssetError:
            logger.error(
                "Multiple image upload failed",
                extra={"folder": folder, "count": len(files)},
            )
            raise

        return list(urls)

    async def delete_image(self, url: str | None) -> DeleteOutcome:
        """Best-effort delete of the object behind a public URL.

        Never raises: failures are logged and reported as FAILED so they
        cannot block the business operation that triggered them.
        """
        if not url or not url.strip():
            return DeleteOutcome(status=DeleteStatus.NOT_FOUND, url=url)

        key: str | None = None
        try:
            key = self.resolver.parse_key(url)
            logger.debug("Deleting image", extra={"url": url, "key": key})
            await self.store.delete(key)

        except MediaAssetError as exc:
            logger.error(
                "Image delete failed",
                extra={"url": url, "key": key, "error_code": exc.error_code},
            )
            return DeleteOutcome(
                status=DeleteStatus.FAILED,
                url=url,
                key=key,
                reason=exc.message,
            )

        except Exception as exc:
            logger.exception("Unexpected error deleting image", extra={"url": url, "key": key})
            return DeleteOutcome(
                status=DeleteStatus.FAILED,
                url=url,
                key=key,
                reason=str(exc) or type(exc).__name__,
            )

        logger.info("Image deleted successfully", extra={"key": key})
        return DeleteOutcome(status=DeleteStatus.DELETED, url=url, key=key)

    async def delete_images(self, urls: Iterable[str | None]) -> BatchDeleteReport:
        """Delete each URL in turn; one failure never stops the rest."""
        report = BatchDeleteReport()

        for url in urls:
            report.outcomes.append(await self.delete_image(url))

        if report.failed:
            logger.warning(
                "Some images could not be deleted",
                extra={
                    "attempted": report.attempted,
                    "failed": report.failed,
                    "failed_keys": [outcome.key for outcome in report.failures],
                },
            )

        return report

    async def get_file_info(self, key: str) -> FileInfo | None:
        """Object metadata, or None on any error (not-found included)."""
        try:
            return await self.store.head(key)
        except NotFoundError:
            logger.info("Image not found", extra={"key": key})
            return None
        except Exception:
            logger.exception("Unable to read image metadata", extra={"key": key})
            return None

    async def replace_image(
        self,
        file: UploadFile,
        folder: str,
        old_url: str | None = None,
    ) -> str:
        """Upload a new image, then best-effort delete the one it replaces.

        Raises:
            ValidationError: If the new file is rejected
            UploadError: If the new upload fails (the old image is kept)
        """
        url = await self.upload_image(file, folder)

        if old_url and old_url != url:
            outcome = await self.delete_image(old_url)
            if not outcome:
                logger.warning(
                    "Replaced image left behind",
                    extra={"old_url": old_url, "reason": outcome.reason},
                )

        return url

    async def append_to_gallery(
        self,
        existing: Sequence[str],
        files: Sequence[UploadFile],
        folder: str,
        *,
        max_items: int = MAX_GALLERY_ITEMS,
    ) -> list[str]:
        """Upload new gallery photos and return the combined URL list.

        Every file and the photo limit are checked before anything is stored.

        Raises:
            GalleryLimitError: If the gallery would exceed `max_items`
            ValidationError: If any file is rejected
            UploadError: If any upload fails after validation
        """
        if len(existing) + len(files) > max_items:
            raise GalleryLimitError(
                message=f"Maximum {max_items} gallery photos allowed",
                details={
                    "existing": len(existing),
                    "new": len(files),
                    "max_items": max_items,
                },
            )

        new_urls = await self.upload_multiple_images(files, folder)
        return [*existing, *new_urls]

    async def remove_from_gallery(
        self,
        gallery: Sequence[str],
        url: str,
    ) -> tuple[list[str], DeleteOutcome]:
        """Drop `url` from a gallery list and best-effort delete its object.

        Raises:
            ValidationError: If `url` is not part of the gallery
        """
        if url not in gallery:
            raise ValidationError(
                message="Photo not found in gallery",
                details={"url": url},
            )

        outcome = await self.delete_image(url)
        return [item for item in gallery if item != url], outcome
