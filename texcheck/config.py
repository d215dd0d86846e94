from __future__ import annotations

# Per-platform defaults (mirrors the editor plugin's shipped settings asset)
DEFAULT_MAX_DIMENSION = {
    "Android": 1024,
    "HMIAndroid": 1024,
    "iOS": 1024,
    "WebGL": 1024,
    "Desktop": 2048,
}

DEFAULT_FORMAT = {
    "Android": "ASTC_6x6",
    "HMIAndroid": "ETC2_RGBA8",
    "iOS": "ASTC_6x6",
    "WebGL": "DXT5",
    "Desktop": "DXT5",
}

DEFAULT_MAX_FOOTPRINT_MB = 20.0
DEFAULT_ADVISORY = "Please follow the project's texture guidelines."

# Importer defaults when a sidecar omits them
DEFAULT_IMPORTER_MAX_SIZE = 2048
DEFAULT_QUALITY = 50

# Mip chain ~ 1 / (1 - 1/4)
MIPMAP_FACTOR = 1.33
BYTES_PER_MB = 1024 * 1024

# Build flavor that turns an Android target into the HMI variant
HMI_FLAVOR = "HMI"

SUPPORTED_EXTS = {".png", ".tga", ".tif", ".tiff", ".jpg", ".jpeg", ".psd", ".bmp", ".exr"}

# Importer configuration lives next to the image: Foo.png -> Foo.png.texcheck.json
SIDECAR_SUFFIX = ".texcheck.json"

TOOL_VERSION = "0.3.0"
