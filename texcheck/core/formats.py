from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from texcheck.errors import ConfigurationError, PreconditionViolation


class PixelFormat(Enum):
    # Uncompressed
    RGBA32 = "RGBA32"
    ARGB32 = "ARGB32"
    RGB24 = "RGB24"
    RGBA16 = "RGBA16"
    ARGB16 = "ARGB16"
    RGB16 = "RGB16"
    R16 = "R16"
    RHALF = "RHalf"
    R8 = "R8"
    ALPHA8 = "Alpha8"
    RG16 = "RG16"
    RGHALF = "RGHalf"
    RGBAHALF = "RGBAHalf"
    RFLOAT = "RFloat"
    RGFLOAT = "RGFloat"
    RGBAFLOAT = "RGBAFloat"

    # BC / DXT
    DXT1 = "DXT1"
    DXT1_CRUNCHED = "DXT1Crunched"
    DXT5 = "DXT5"
    DXT5_CRUNCHED = "DXT5Crunched"
    BC4 = "BC4"
    BC5 = "BC5"
    BC6H = "BC6H"
    BC7 = "BC7"

    # ETC / EAC
    ETC_RGB4 = "ETC_RGB4"
    ETC_RGB4_CRUNCHED = "ETC_RGB4Crunched"
    ETC2_RGB4 = "ETC2_RGB4"
    ETC2_RGB4_PUNCHTHROUGH_ALPHA = "ETC2_RGB4_PUNCHTHROUGH_ALPHA"
    ETC2_RGBA8 = "ETC2_RGBA8"
    ETC2_RGBA8_CRUNCHED = "ETC2_RGBA8Crunched"
    EAC_R = "EAC_R"
    EAC_RG = "EAC_RG"

    # PVRTC
    PVRTC_RGB2 = "PVRTC_RGB2"
    PVRTC_RGBA2 = "PVRTC_RGBA2"
    PVRTC_RGB4 = "PVRTC_RGB4"
    PVRTC_RGBA4 = "PVRTC_RGBA4"

    # ASTC (block footprint in the name)
    ASTC_4X4 = "ASTC_4x4"
    ASTC_5X5 = "ASTC_5x5"
    ASTC_6X6 = "ASTC_6x6"
    ASTC_8X8 = "ASTC_8x8"
    ASTC_10X10 = "ASTC_10x10"
    ASTC_12X12 = "ASTC_12x12"

    # Chosen by the host importer at build time
    AUTOMATIC = "Automatic"

    def __str__(self) -> str:
        return self.value


def _astc(block: int) -> float:
    # 128 bits per block regardless of footprint
    return 16.0 / (block * block)


_BASE_BPP: Dict[PixelFormat, float] = {
    PixelFormat.RGBA32: 4.0,
    PixelFormat.ARGB32: 4.0,
    PixelFormat.RGB24: 3.0,
    PixelFormat.RGBA16: 2.0,
    PixelFormat.ARGB16: 2.0,
    PixelFormat.RGB16: 2.0,
    PixelFormat.R16: 2.0,
    PixelFormat.RHALF: 2.0,
    PixelFormat.R8: 1.0,
    PixelFormat.ALPHA8: 1.0,
    PixelFormat.RG16: 1.0,
    PixelFormat.RGHALF: 4.0,
    PixelFormat.RGBAHALF: 8.0,
    PixelFormat.RFLOAT: 4.0,
    PixelFormat.RGFLOAT: 8.0,
    PixelFormat.RGBAFLOAT: 16.0,
    PixelFormat.DXT1: 0.5,
    PixelFormat.DXT1_CRUNCHED: 0.5,
    PixelFormat.DXT5: 1.0,
    PixelFormat.DXT5_CRUNCHED: 1.0,
    PixelFormat.BC4: 0.5,
    PixelFormat.BC5: 1.0,
    PixelFormat.BC6H: 1.0,
    PixelFormat.BC7: 1.0,
    PixelFormat.ETC_RGB4: 0.5,
    PixelFormat.ETC_RGB4_CRUNCHED: 0.5,
    PixelFormat.ETC2_RGB4: 0.5,
    PixelFormat.ETC2_RGB4_PUNCHTHROUGH_ALPHA: 0.5,
    PixelFormat.ETC2_RGBA8: 1.0,
    PixelFormat.ETC2_RGBA8_CRUNCHED: 1.0,
    PixelFormat.EAC_R: 0.5,
    PixelFormat.EAC_RG: 1.0,
    PixelFormat.PVRTC_RGB2: 0.25,
    PixelFormat.PVRTC_RGBA2: 0.25,
    PixelFormat.PVRTC_RGB4: 0.5,
    PixelFormat.PVRTC_RGBA4: 0.5,
    PixelFormat.ASTC_4X4: _astc(4),
    PixelFormat.ASTC_5X5: _astc(5),
    PixelFormat.ASTC_6X6: _astc(6),
    PixelFormat.ASTC_8X8: _astc(8),
    PixelFormat.ASTC_10X10: _astc(10),
    PixelFormat.ASTC_12X12: _astc(12),
}

# Every concrete format must carry a cost; fail at import rather than fall back silently.
_UNCOSTED = set(PixelFormat) - set(_BASE_BPP) - {PixelFormat.AUTOMATIC}
if _UNCOSTED:
    raise RuntimeError(f"bytes-per-pixel missing for: {sorted(f.value for f in _UNCOSTED)}")

UNKNOWN_FORMAT_BPP = 1.0

# Encoders whose output size tracks the compression quality slider
QUALITY_SENSITIVE = frozenset({PixelFormat.ASTC_10X10, PixelFormat.ASTC_12X12})

# Small on disk, full block size once loaded
CRUNCHED = frozenset(
    {
        PixelFormat.DXT1_CRUNCHED,
        PixelFormat.DXT5_CRUNCHED,
        PixelFormat.ETC_RGB4_CRUNCHED,
        PixelFormat.ETC2_RGBA8_CRUNCHED,
    }
)

_MIN_QUALITY_FACTOR = 0.05


def quality_factor(quality: int) -> float:
    q = min(100, max(0, int(quality)))
    return max(_MIN_QUALITY_FACTOR, 1.0 + (q - 50) / 200.0)


def bytes_per_pixel(fmt: Optional[PixelFormat], quality: int = 50) -> float:
    """
    Runtime bytes per pixel for a concrete format.
    None (format not known to the table) costs a conservative 1.0.
    """
    if fmt is None:
        return UNKNOWN_FORMAT_BPP
    if fmt is PixelFormat.AUTOMATIC:
        raise PreconditionViolation("Automatic format must be resolved before looking up its cost")

    base = _BASE_BPP[fmt]
    if fmt in QUALITY_SENSITIVE:
        return base * quality_factor(quality)
    return base


def is_crunched(fmt: Optional[PixelFormat]) -> bool:
    return fmt in CRUNCHED


def parse_format(name: str) -> PixelFormat:
    """
    Accepts host importer names ("ASTC_6x6", "DXT5Crunched") or member names,
    case-insensitively.
    """
    key = str(name).strip().lower()
    if not key:
        raise ConfigurationError("Empty texture format name")
    for fmt in PixelFormat:
        if key == fmt.value.lower() or key == fmt.name.lower():
            return fmt
    raise ConfigurationError(f"Unknown texture format '{name}'")
