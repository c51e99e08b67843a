"""Custom exception classes for the media asset subsystem."""

from enum import Enum
from typing import Any

from media_assets.utils.constants import (
    ERROR_CODE_CONFIGURATION,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_GALLERY_LIMIT_EXCEEDED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    ERROR_CODE_MALFORMED_URL,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORAGE_UNAVAILABLE,
    ERROR_CODE_STORE,
    ERROR_CODE_TRANSCODE_FAILED,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
    ERROR_CODE_VARIANT_GENERATION_FAILED,
)


class ErrorKind(str, Enum):
    """Coarse error category callers can branch on."""

    VALIDATION = "validation"
    TRANSCODE = "transcode"
    STORE = "store"
    CONFIGURATION = "configuration"
    UPLOAD = "upload"


class MediaAssetError(Exception):
    """
    Base exception for all media asset errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    kind: ErrorKind = ErrorKind.UPLOAD

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(MediaAssetError):
    """Raised when an incoming file or argument is rejected."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MIMETypeError(ValidationError):
    """Raised when an unsupported MIME type is provided."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UNSUPPORTED_MIME_TYPE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class FileSizeError(ValidationError):
    """Raised when file size exceeds the allowed limit."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FILE_SIZE_EXCEEDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class GalleryLimitError(ValidationError):
    """Raised when a gallery would grow past its photo limit."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_GALLERY_LIMIT_EXCEEDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class TranscodeError(MediaAssetError):
    """Raised when image data cannot be decoded or re-encoded."""

    kind = ErrorKind.TRANSCODE

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_TRANSCODE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class VariantGenerationError(TranscodeError):
    """Raised when one or more responsive variants fail in all-or-nothing mode."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VARIANT_GENERATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StoreError(MediaAssetError):
    """Raised when an object store operation fails."""

    kind = ErrorKind.STORE

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(StoreError):
    """Raised when a requested object is not found."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ConfigurationError(MediaAssetError):
    """Raised when the deployment configuration is missing or inconsistent."""

    kind = ErrorKind.CONFIGURATION

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CONFIGURATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StorageUnavailableError(ConfigurationError):
    """Raised when the object store cannot be used because it is unconfigured."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MalformedUrlError(ConfigurationError):
    """Raised when a generated public URL carries a doubled scheme."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_MALFORMED_URL,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class UploadError(MediaAssetError):
    """Raised when an upload fails after validation.

    `kind` reports the category of the wrapped failure and `cause`
    references the original exception.
    """

    def __init__(
        self,
        *,
        message: str,
        cause: BaseException,
        error_code: str = ERROR_CODE_IMAGE_UPLOAD_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
        self.cause = cause
        self.kind = cause.kind if isinstance(cause, MediaAssetError) else ErrorKind.UPLOAD
