"""Storage key generation."""

import uuid

from media_assets.models.errors import ValidationError
from media_assets.utils.constants import (
    ERROR_CODE_INVALID_FOLDER,
    FOLDER_FORBIDDEN_CHARS,
    OUTPUT_EXTENSION,
)


def new_unique_id() -> str:
    """Generate a random 128-bit identifier (UUID4, hyphenated)."""
    return str(uuid.uuid4())


def build_key(folder: str, unique_id: str, variant_suffix: str | None = None) -> str:
    """Compose `<folder>/<unique_id>[-<suffix>].webp`.

    Raises:
        ValidationError: If the folder is empty, escapes its namespace or
            contains characters that are reserved in URLs
    """
    cleaned = folder.strip().strip("/")
    if (
        not cleaned
        or ".." in cleaned.split("/")
        or FOLDER_FORBIDDEN_CHARS.intersection(cleaned)
    ):
        raise ValidationError(
            message="Invalid storage folder",
            error_code=ERROR_CODE_INVALID_FOLDER,
            details={"folder": folder},
        )

    suffix = f"-{variant_suffix}" if variant_suffix else ""
    return f"{cleaned}/{unique_id}{suffix}.{OUTPUT_EXTENSION}"


def new_key(folder: str, variant_suffix: str | None = None) -> str:
    """Fresh key for one upload; never consults storage state."""
    return build_key(folder, new_unique_id(), variant_suffix)
