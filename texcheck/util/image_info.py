from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

# Image.MAX_IMAGE_PIXELS is process-wide; header reads lift it one at a time.
_BOMB_GUARD_LOCK = threading.Lock()


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int


def read_image_info(path: Path) -> tuple[Optional[ImageInfo], Optional[str]]:
    """
    Reads the image header with Pillow (pixels are never decoded).
    Returns (ImageInfo|None, error_message|None).

    The decompression-bomb limit is lifted for the read: very large sources
    are exactly what the size rule needs to see.
    """
    with _BOMB_GUARD_LOCK:
        limit = Image.MAX_IMAGE_PIXELS
        Image.MAX_IMAGE_PIXELS = None
        try:
            with Image.open(path) as img:
                w, h = img.size
                return ImageInfo(width=w, height=h), None

        except UnidentifiedImageError:
            return None, "Unsupported image format (Pillow could not identify file)."
        except (OSError, ValueError, SyntaxError) as e:
            # Truncated or malformed headers surface as any of these from Pillow plugins
            return None, f"Failed to read image metadata: {e}"
        finally:
            Image.MAX_IMAGE_PIXELS = limit


def file_size_bytes(path: Path) -> Optional[int]:
    """On-disk size, or None when the file is gone or unreadable."""
    try:
        return path.stat().st_size
    except OSError:
        return None
