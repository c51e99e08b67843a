"""WebP transcoding with a single web delivery profile.

Every stored image goes through `transcode`: decode, honour EXIF
orientation, downscale to fit inside a square bounding box (never
upscale), and re-encode as WebP with a fixed quality and maximum
compression effort.
"""

import asyncio
from io import BytesIO

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from media_assets.models.errors import TranscodeError
from media_assets.utils.constants import (
    OUTPUT_FORMAT,
    WEBP_ALPHA_QUALITY,
    WEBP_METHOD,
    WEBP_QUALITY,
)

logger = Logger(UTC=True)

_ALPHA_MODES = frozenset({"RGBA", "LA", "PA"})


def _normalize_mode(img: Image.Image) -> Image.Image:
    """Convert to RGB, or RGBA when the source carries transparency."""
    if img.mode in ("RGB", "RGBA"):
        return img

    has_alpha = img.mode in _ALPHA_MODES or (img.mode == "P" and "transparency" in img.info)
    return img.convert("RGBA" if has_alpha else "RGB")


def transcode(data: bytes, max_dimension: int) -> bytes:
    """Re-encode image bytes as WebP, bounded by `max_dimension`.

    Args:
        data: Source image bytes (any format Pillow can decode)
        max_dimension: Upper bound for both width and height, in pixels

    Returns:
        Encoded WebP bytes

    Raises:
        TranscodeError: If the input cannot be decoded or encoded
    """
    if max_dimension <= 0:
        raise TranscodeError(
            message="Maximum dimension must be positive",
            details={"max_dimension": max_dimension},
        )

    try:
        with Image.open(BytesIO(data)) as source:
            source.load()
            img = ImageOps.exif_transpose(source)
            img = _normalize_mode(img)

            # thumbnail() only ever shrinks and keeps the aspect ratio
            img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

            output = BytesIO()
            img.save(
                output,
                format=OUTPUT_FORMAT,
                quality=WEBP_QUALITY,
                method=WEBP_METHOD,
                alpha_quality=WEBP_ALPHA_QUALITY,
            )

    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        logger.warning(
            "Unsupported or corrupt image data",
            extra={"size": len(data), "error": str(exc)},
        )
        raise TranscodeError(
            message="Image data is corrupt or in an unsupported format",
            details={"size": len(data)},
        ) from exc

    except (OSError, ValueError, SyntaxError) as exc:
        logger.warning(
            "Image transcoding failed",
            extra={"size": len(data), "error": str(exc)},
        )
        raise TranscodeError(
            message="Unable to process image data",
            details={"size": len(data)},
        ) from exc

    encoded = output.getvalue()
    logger.debug(
        "Image transcoded",
        extra={
            "input_size": len(data),
            "output_size": len(encoded),
            "width": img.width,
            "height": img.height,
            "max_dimension": max_dimension,
        },
    )
    return encoded


async def transcode_async(data: bytes, max_dimension: int) -> bytes:
    """Run `transcode` on a worker thread so the event loop stays responsive."""
    return await asyncio.to_thread(transcode, data, max_dimension)
