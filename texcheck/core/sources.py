from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from texcheck.config import SIDECAR_SUFFIX, SUPPORTED_EXTS
from texcheck.core.importer import AssetRecord, importer_from_json_dict
from texcheck.errors import ConfigurationError
from texcheck.util.image_info import file_size_bytes, read_image_info

logger = logging.getLogger("texcheck.core.sources")


@dataclass(frozen=True)
class SkippedFile:
    rel_path: str
    reason: str


def iter_texture_files(root: Path) -> Iterator[Path]:
    for p in root.rglob("*"):
        if not p.is_file():
            continue
        if p.suffix.lower() not in SUPPORTED_EXTS:
            continue
        yield p


def sidecar_path(image: Path) -> Path:
    return image.with_name(image.name + SIDECAR_SUFFIX)


def _rel_path(p: Path, base: Path) -> str:
    try:
        return p.resolve().relative_to(base.resolve()).as_posix()
    except ValueError:
        return p.resolve().as_posix()


def load_asset(image: Path, base: Path) -> Tuple[Optional[AssetRecord], Optional[str]]:
    """
    Build an AssetRecord from an image and its optional sidecar.
    Returns (AssetRecord|None, reason_skipped|None).
    """
    info, err = read_image_info(image)
    if err:
        return None, err

    side = sidecar_path(image)
    data: dict = {}
    if side.exists():
        try:
            data = json.loads(side.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # ValueError covers JSONDecodeError and non-UTF-8 bytes
            return None, f"Unreadable importer settings '{side.name}': {e}"

    try:
        importer = importer_from_json_dict(data, info.width, info.height)
    except ConfigurationError as e:
        return None, f"Invalid importer settings '{side.name}': {e}"

    size = file_size_bytes(image)
    if size is not None:
        importer = replace(importer, file_size_bytes=size)

    asset_id = str(data.get("guid") or image.resolve().as_posix())
    return AssetRecord(asset_id=asset_id, path=_rel_path(image, base), importer=importer), None


def scan_roots(roots: Sequence[Path], project_root: Optional[Path] = None) -> Tuple[List[AssetRecord], List[SkippedFile]]:
    """
    Collect candidate textures under every root. Overlapping roots may yield the
    same asset twice; the batch pass de-duplicates by asset_id.
    Paths are reported relative to `project_root` (default: each root's parent).
    """
    assets: List[AssetRecord] = []
    skipped: List[SkippedFile] = []

    for root in roots:
        root = Path(root)
        if not root.is_dir():
            raise ConfigurationError(f"Scan root is not a directory: {root}")
        base = Path(project_root) if project_root else root.resolve().parent

        for p in iter_texture_files(root):
            rec, reason = load_asset(p, base)
            if rec is None:
                rel = _rel_path(p, base)
                logger.warning("Skipping %s: %s", rel, reason)
                skipped.append(SkippedFile(rel_path=rel, reason=reason or "unknown"))
                continue
            assets.append(rec)

    assets.sort(key=lambda a: a.path.lower())
    skipped.sort(key=lambda s: s.rel_path.lower())
    return assets, skipped
