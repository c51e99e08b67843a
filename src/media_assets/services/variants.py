"""Responsive variant generation on top of the transcoder."""

import asyncio
from collections.abc import Sequence

from aws_lambda_powertools import Logger

from media_assets.models.asset import VariantBatch
from media_assets.models.errors import TranscodeError, VariantGenerationError
from media_assets.services.transcoder import transcode_async
from media_assets.utils.constants import VARIANT_SPECS

logger = Logger(UTC=True)

VariantSpecs = Sequence[tuple[str, int]]


async def generate_variants(
    data: bytes,
    specs: VariantSpecs = VARIANT_SPECS,
    *,
    partial: bool = False,
) -> VariantBatch:
    """Transcode `data` once per (name, max_dimension) entry, concurrently.

    Args:
        data: Source image bytes
        specs: Ordered variant table
        partial: When True, failed variants are reported in
                 `VariantBatch.failures` instead of failing the batch

    Returns:
        VariantBatch with rendered variants in table order

    Raises:
        VariantGenerationError: In all-or-nothing mode, if any variant fails
    """
    names = [name for name, _ in specs]
    if len(set(names)) != len(names):
        raise ValueError("Variant names must be unique")

    results = await asyncio.gather(
        *(transcode_async(data, max_dimension) for _, max_dimension in specs),
        return_exceptions=True,
    )

    batch = VariantBatch()
    for name, result in zip(names, results):
        if isinstance(result, TranscodeError):
            batch.failures[name] = result.message
        elif isinstance(result, BaseException):
            raise result
        else:
            batch.rendered.append((name, result))

    if batch.failures:
        logger.warning(
            "Variant generation incomplete",
            extra={"failed": sorted(batch.failures), "partial": partial},
        )
        if not partial:
            raise VariantGenerationError(
                message="Unable to generate image variants",
                details={"failures": dict(batch.failures)},
            )

    logger.debug(
        "Variants generated",
        extra={"variants": [name for name, _ in batch.rendered]},
    )
    return batch
