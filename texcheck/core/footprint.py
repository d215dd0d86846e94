from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

from texcheck.config import BYTES_PER_MB, MIPMAP_FACTOR
from texcheck.core.formats import UNKNOWN_FORMAT_BPP, PixelFormat, bytes_per_pixel
from texcheck.core.resolver import EffectiveTextureSettings
from texcheck.errors import PreconditionViolation

logger = logging.getLogger("texcheck.core.footprint")


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def scaled_dimensions(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    Clamp the longer edge to min(longer edge, max_dimension) and scale the
    shorter edge by the same ratio (rounded, at least 1).
    """
    if width <= 0 or height <= 0 or max_dimension <= 0:
        return 0, 0

    longest = max(width, height)
    actual = min(longest, max_dimension)
    if actual == longest:
        return width, height

    if width >= height:
        return actual, max(1, _round_half_up(height * actual / width))
    return max(1, _round_half_up(width * actual / height)), actual


def estimate_footprint_mb(
    settings: EffectiveTextureSettings,
    resolved_format: Optional[PixelFormat],
    strict: bool = True,
) -> float:
    """
    Estimated runtime memory in MB for the texture as the build would emit it.

    `resolved_format` must be concrete. Passing Automatic raises
    PreconditionViolation when `strict`; otherwise it is costed like an
    unknown format.
    """
    w, h = scaled_dimensions(settings.source_width, settings.source_height, settings.max_dimension)

    if resolved_format is PixelFormat.AUTOMATIC:
        if strict:
            raise PreconditionViolation("estimate_footprint_mb called with an unresolved Automatic format")
        logger.warning("Unresolved Automatic format; costing at %.1f bytes/pixel", UNKNOWN_FORMAT_BPP)
        bpp = UNKNOWN_FORMAT_BPP
    else:
        bpp = bytes_per_pixel(resolved_format, settings.compression_quality)

    size_bytes = w * h * bpp
    if settings.mipmap_enabled:
        size_bytes *= MIPMAP_FACTOR

    return size_bytes / BYTES_PER_MB
