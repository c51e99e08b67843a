"""Media Asset Storage Package."""

__version__ = "1.0.0"
__description__ = (
    "Image validation, WebP transcoding and S3-compatible storage for tour and service media"
)

__all__ = ["bootstrap", "config", "infrastructure", "models", "repositories", "services", "utils"]
