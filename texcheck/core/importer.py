from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from texcheck.config import DEFAULT_IMPORTER_MAX_SIZE, DEFAULT_QUALITY
from texcheck.core.formats import PixelFormat, parse_format
from texcheck.errors import ConfigurationError
from texcheck.util.json_values import as_bool


class CompressionMode(Enum):
    UNCOMPRESSED = "Uncompressed"
    COMPRESSED = "Compressed"
    COMPRESSED_LQ = "CompressedLQ"
    COMPRESSED_HQ = "CompressedHQ"

    @property
    def is_compressed(self) -> bool:
        return self is not CompressionMode.UNCOMPRESSED


def parse_compression(name: str) -> CompressionMode:
    key = str(name).strip().lower()
    for m in CompressionMode:
        if key in (m.value.lower(), m.name.lower()):
            return m
    raise ConfigurationError(f"Unknown compression mode '{name}'")


@dataclass(frozen=True)
class PlatformBlock:
    max_size: int
    format: PixelFormat
    quality: int = DEFAULT_QUALITY
    overridden: bool = True


@dataclass(frozen=True)
class ImporterConfig:
    """What the host importer holds for one texture (never pixel data)."""

    source_width: int
    source_height: int
    compression: CompressionMode = CompressionMode.COMPRESSED
    max_size: int = DEFAULT_IMPORTER_MAX_SIZE
    quality: int = DEFAULT_QUALITY
    mipmap_enabled: bool = True
    overrides: Dict[str, PlatformBlock] = field(default_factory=dict)  # host platform name -> block
    file_size_bytes: Optional[int] = None
    automatic_formats: Dict[str, PixelFormat] = field(default_factory=dict)  # recorded by the host


@dataclass(frozen=True)
class AssetRecord:
    asset_id: str   # stable across renames (host GUID or resolved path)
    path: str       # project-relative, forward slashes
    importer: ImporterConfig


# ---------------------------------------------------------------------------
# JSON (sidecar files)
# ---------------------------------------------------------------------------

def _block_from_json(d: Dict[str, Any], default_quality: int) -> PlatformBlock:
    if not isinstance(d, dict):
        raise ConfigurationError(f"Platform block must be an object, got {d!r}")
    try:
        return PlatformBlock(
            max_size=int(d["max_size"]),
            format=parse_format(d["format"]),
            quality=int(d.get("quality", default_quality)),
            overridden=as_bool(d.get("overridden", True), "overridden"),
        )
    except KeyError as e:
        raise ConfigurationError(f"Platform block missing field {e}") from None
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed platform block: {e}") from None


def importer_from_json_dict(d: Dict[str, Any], width: int, height: int) -> ImporterConfig:
    """
    Sidecar layout:
      {"compression": "Compressed", "max_size": 2048, "quality": 50,
       "mipmaps": true,
       "platforms": {"Android": {"overridden": true, "max_size": 1024,
                                 "format": "ASTC_6x6", "quality": 50}},
       "automatic_formats": {"Standalone": "DXT5"}}
    Source dimensions come from the image itself.
    """
    if not isinstance(d, dict):
        raise ConfigurationError("Importer settings must be a JSON object")

    try:
        quality = int(d.get("quality", DEFAULT_QUALITY))
        max_size = int(d.get("max_size", DEFAULT_IMPORTER_MAX_SIZE))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed importer settings: {e}") from None

    platforms = d.get("platforms") or {}
    recorded = d.get("automatic_formats") or {}
    if not isinstance(platforms, dict) or not isinstance(recorded, dict):
        raise ConfigurationError("'platforms' and 'automatic_formats' must be objects keyed by platform name")

    overrides = {str(name): _block_from_json(block, quality) for name, block in platforms.items()}
    auto = {str(name): parse_format(fmt) for name, fmt in recorded.items()}

    return ImporterConfig(
        source_width=width,
        source_height=height,
        compression=parse_compression(d.get("compression", CompressionMode.COMPRESSED.value)),
        max_size=max_size,
        quality=quality,
        mipmap_enabled=as_bool(d.get("mipmaps", True), "mipmaps"),
        overrides=overrides,
        automatic_formats=auto,
    )
