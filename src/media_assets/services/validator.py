"""Upload validation: MIME allow-list and size ceiling."""

from aws_lambda_powertools import Logger

from media_assets.models.errors import FileSizeError, MIMETypeError
from media_assets.models.upload import UploadFile
from media_assets.utils.constants import (
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE,
    format_file_size,
    get_max_file_size_mb,
)

logger = Logger(UTC=True)


def validate_image(file: UploadFile) -> None:
    """Reject files with a disallowed type or an oversized body.

    Runs before any transcoding or network I/O and has no side effects.

    Raises:
        MIMETypeError: If the declared MIME type is not JPEG, PNG or WebP
        FileSizeError: If the declared size or the buffer exceeds MAX_FILE_SIZE
    """
    mimetype = file.mimetype.lower()

    if mimetype not in ALLOWED_MIME_TYPES:
        logger.warning("Unsupported MIME type", extra={"mime_type": file.mimetype})
        raise MIMETypeError(
            message="Invalid file type. Only JPEG, PNG, and WebP are allowed.",
            details={"mime_type": file.mimetype, "allowed": sorted(ALLOWED_MIME_TYPES)},
        )

    # Both the declared size and the actual buffer must fit
    size = max(file.size, len(file.buffer))

    if size > MAX_FILE_SIZE:
        logger.warning(
            "File size exceeds limit",
            extra={
                "size": size,
                "declared_size": file.size,
                "max_size": MAX_FILE_SIZE,
            },
        )
        raise FileSizeError(
            message=f"File too large. Maximum size is {get_max_file_size_mb()}MB.",
            details={
                "size": size,
                "max_size": MAX_FILE_SIZE,
                "size_human": format_file_size(size),
            },
        )
