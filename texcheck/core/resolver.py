from __future__ import annotations

from dataclasses import dataclass

from texcheck.core.formats import PixelFormat
from texcheck.core.importer import ImporterConfig
from texcheck.profiles import PlatformId


@dataclass(frozen=True)
class EffectiveTextureSettings:
    max_dimension: int
    format: PixelFormat
    mipmap_enabled: bool
    compression_quality: int
    source_width: int
    source_height: int
    uses_platform_override: bool

    @property
    def source_max(self) -> int:
        return max(self.source_width, self.source_height)

    @property
    def actual_max(self) -> int:
        """Longest edge after the importer's max-size clamp."""
        return min(self.source_max, self.max_dimension)


def default_format(importer: ImporterConfig) -> PixelFormat:
    if importer.compression.is_compressed:
        return PixelFormat.AUTOMATIC
    return PixelFormat.RGBA32


def resolve(importer: ImporterConfig, platform: PlatformId) -> EffectiveTextureSettings:
    """
    Settings the build would use for `platform`: the platform block when it is
    overridden, otherwise the importer defaults. Mip-maps and source size are
    shared by every platform.
    """
    block = importer.overrides.get(platform.host_name)
    if block is not None and block.overridden:
        return EffectiveTextureSettings(
            max_dimension=block.max_size,
            format=block.format,
            mipmap_enabled=importer.mipmap_enabled,
            compression_quality=block.quality,
            source_width=importer.source_width,
            source_height=importer.source_height,
            uses_platform_override=True,
        )

    return EffectiveTextureSettings(
        max_dimension=importer.max_size,
        format=default_format(importer),
        mipmap_enabled=importer.mipmap_enabled,
        compression_quality=importer.quality,
        source_width=importer.source_width,
        source_height=importer.source_height,
        uses_platform_override=False,
    )
