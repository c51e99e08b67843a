"""Global constants used throughout the media asset subsystem.

This module centralizes error codes, upload constraints, the transcoding
profile, storage headers and environment variable names so every call site
(tours, services, content, galleries) agrees on the same values.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_INVALID_FOLDER = "INVALID_FOLDER"
ERROR_CODE_INVALID_URL = "INVALID_URL"
ERROR_CODE_GALLERY_LIMIT_EXCEEDED = "GALLERY_LIMIT_EXCEEDED"

# Transcoding Errors
ERROR_CODE_TRANSCODE_FAILED = "TRANSCODE_FAILED"
ERROR_CODE_VARIANT_GENERATION_FAILED = "VARIANT_GENERATION_FAILED"

# Storage Errors
ERROR_CODE_STORE = "STORE_ERROR"
ERROR_CODE_STORE_PUT_FAILED = "STORE_PUT_FAILED"
ERROR_CODE_STORE_DELETE_FAILED = "STORE_DELETE_FAILED"
ERROR_CODE_STORE_HEAD_FAILED = "STORE_HEAD_FAILED"
ERROR_CODE_STORE_TIMEOUT = "STORE_TIMEOUT"
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Configuration Errors
ERROR_CODE_CONFIGURATION = "CONFIGURATION_ERROR"
ERROR_CODE_STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
ERROR_CODE_MALFORMED_URL = "MALFORMED_URL"

# Upload Errors
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB in bytes

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
    }
)

MAX_GALLERY_ITEMS = 10


# ============================================================================
# Transcoding Profile
# ============================================================================

OUTPUT_FORMAT = "WEBP"
OUTPUT_EXTENSION = "webp"
OUTPUT_CONTENT_TYPE = "image/webp"

WEBP_QUALITY = 85
WEBP_METHOD = 6  # maximum compression effort
WEBP_ALPHA_QUALITY = 100

DEFAULT_MAX_DIMENSION = 2000

VARIANT_SPECS: Final[tuple[tuple[str, int], ...]] = (
    ("thumb", 400),
    ("medium", 800),
    ("large", 1200),
    ("original", 2000),
)


# ============================================================================
# Object Store
# ============================================================================

CACHE_CONTROL_IMMUTABLE = "public, max-age=31536000"  # 1 year
STORE_HOST_SUFFIX = "r2.cloudflarestorage.com"
STORE_REGION = "auto"

DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 30.0
DEFAULT_OPERATION_TIMEOUT = 60.0

URL_SCHEMES = ("https://", "http://")
DOUBLED_SCHEME_MARKERS = ("https://https://", "//https://")
# Characters a folder may not contain: they break parse_key(build_url(key)) == key
FOLDER_FORBIDDEN_CHARS: Final[frozenset[str]] = frozenset("?#%\\")


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_ACCOUNT_ID = "CLOUDFLARE_ACCOUNT_ID"
ENV_ACCESS_KEY_ID = "R2_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "R2_SECRET_ACCESS_KEY"
ENV_BUCKET_NAME = "R2_BUCKET_NAME"
ENV_PUBLIC_DOMAIN = "R2_PUBLIC_DOMAIN"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_CONNECT_TIMEOUT = "MEDIA_STORE_CONNECT_TIMEOUT"
ENV_READ_TIMEOUT = "MEDIA_STORE_READ_TIMEOUT"
ENV_OPERATION_TIMEOUT = "MEDIA_STORE_OPERATION_TIMEOUT"

REQUIRED_ENV_VARS: Final[tuple[str, ...]] = (
    ENV_ACCOUNT_ID,
    ENV_ACCESS_KEY_ID,
    ENV_SECRET_ACCESS_KEY,
    ENV_BUCKET_NAME,
)

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
