from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from texcheck.config import BYTES_PER_MB
from texcheck.core.exclusion import is_excluded
from texcheck.core.footprint import estimate_footprint_mb
from texcheck.core.formats import PixelFormat, is_crunched
from texcheck.core.importer import AssetRecord, ImporterConfig
from texcheck.core.resolver import EffectiveTextureSettings, resolve
from texcheck.errors import PreconditionViolation
from texcheck.profiles import CheckSettings, PlatformId, PlatformPolicy

logger = logging.getLogger("texcheck.core.compliance")

# Host capability: which concrete format "Automatic" becomes for a platform.
AutoFormatResolver = Callable[[PlatformId, ImporterConfig], Optional[PixelFormat]]


class RuleKind(Enum):
    AUTO_RESOLUTION = "auto-resolution"
    SIZE = "size"
    FORMAT = "format"
    FOOTPRINT = "footprint"
    DISK_SIZE = "disk-size"
    ADVISORY = "advisory"


@dataclass(frozen=True)
class Diagnostic:
    level: str  # "INFO" | "ERROR"
    kind: RuleKind
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ComplianceVerdict:
    path: str
    has_issue: bool
    diagnostics: Tuple[Diagnostic, ...] = ()
    platform: Optional[PlatformId] = None
    resolved_format: Optional[PixelFormat] = None
    footprint_mb: Optional[float] = None

    @classmethod
    def clean(cls, path: str, platform: Optional[PlatformId] = None) -> "ComplianceVerdict":
        return cls(path=path, has_issue=False, platform=platform)

    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == "ERROR"]

    def kinds(self) -> List[RuleKind]:
        return [d.kind for d in self.diagnostics]

    def message(self) -> str:
        name = posixpath.basename(self.path.replace("\\", "/"))
        lines = [f"Texture: {name}"]
        lines.extend(d.message for d in self.diagnostics)
        return "\n".join(lines) + "\n"


def recorded_automatic_format(platform: PlatformId, importer: ImporterConfig) -> Optional[PixelFormat]:
    """Automatic format as recorded by the host importer for this platform's block."""
    return importer.automatic_formats.get(platform.host_name)


class ComplianceEvaluator:
    """
    Checks one texture against the policy of the active platform.

    Stateless between calls; settings are read-only for its lifetime.
    """

    def __init__(self, settings: CheckSettings, resolve_automatic: AutoFormatResolver = recorded_automatic_format):
        self.settings = settings
        self.resolve_automatic = resolve_automatic

    def evaluate(self, asset: AssetRecord, platform: PlatformId) -> ComplianceVerdict:
        path = asset.path
        if not self.settings.enable_check:
            return ComplianceVerdict.clean(path, platform)

        if is_excluded(path, self.settings.exclusions):
            logger.debug("Excluded: %s", path)
            return ComplianceVerdict.clean(path, platform)

        policy = self.settings.policies.policy_for(platform)
        eff = resolve(asset.importer, platform)

        if eff.actual_max <= 0:
            logger.warning("Skipping %s: empty source size (%dx%d)", path, eff.source_width, eff.source_height)
            return ComplianceVerdict.clean(path, platform)

        notes: List[Diagnostic] = []
        size_diags = self._check_size(eff, policy, platform)

        fmt = eff.format
        if fmt is PixelFormat.AUTOMATIC:
            fmt = self._resolve_automatic(asset, platform)
            if fmt is PixelFormat.AUTOMATIC:
                notes.append(
                    Diagnostic(
                        "INFO",
                        RuleKind.AUTO_RESOLUTION,
                        f"Automatic format could not be resolved for {platform}; format check skipped",
                        {"platform": platform.value, "resolved": None},
                    )
                )
            else:
                notes.append(
                    Diagnostic(
                        "INFO",
                        RuleKind.AUTO_RESOLUTION,
                        f"Automatic format resolves to {fmt} on {platform}",
                        {"platform": platform.value, "resolved": fmt.value},
                    )
                )

        format_diags = [] if fmt is PixelFormat.AUTOMATIC else self._check_format(fmt, policy, platform)

        footprint_mb = estimate_footprint_mb(eff, fmt, strict=self.settings.strict)
        footprint_diags = self._check_footprint(footprint_mb, fmt, policy)
        disk_diags = self._check_disk_size(asset, policy)

        failed = [d for d in size_diags + format_diags + footprint_diags + disk_diags if d.level == "ERROR"]
        has_issue = bool(failed)

        diagnostics = notes + size_diags + format_diags + footprint_diags + disk_diags
        if has_issue:
            diagnostics.append(
                Diagnostic(
                    "INFO",
                    RuleKind.ADVISORY,
                    f"Note: {self.settings.advisory_for(platform)}",
                )
            )
            logger.debug("%s: %d rule(s) failed on %s", path, len(failed), platform)

        return ComplianceVerdict(
            path=path,
            has_issue=has_issue,
            diagnostics=tuple(diagnostics),
            platform=platform,
            resolved_format=None if fmt is PixelFormat.AUTOMATIC else fmt,
            footprint_mb=footprint_mb,
        )

    # -------------------------
    # Rules
    # -------------------------

    def _resolve_automatic(self, asset: AssetRecord, platform: PlatformId) -> PixelFormat:
        fmt = self.resolve_automatic(platform, asset.importer)
        if fmt is None or fmt is PixelFormat.AUTOMATIC:
            if self.settings.strict:
                raise PreconditionViolation(
                    f"Host did not resolve the Automatic format of '{asset.path}' for {platform}"
                )
            logger.warning("No automatic format recorded for %s on %s", asset.path, platform)
            return PixelFormat.AUTOMATIC
        return fmt

    @staticmethod
    def _check_size(
        eff: EffectiveTextureSettings, policy: PlatformPolicy, platform: PlatformId
    ) -> List[Diagnostic]:
        actual = eff.actual_max
        if actual <= policy.max_dimension:
            return []
        return [
            Diagnostic(
                "ERROR",
                RuleKind.SIZE,
                f"Actual max size too large: {actual}\n"
                f"Source size: {eff.source_width}x{eff.source_height}, max size setting: {eff.max_dimension}\n"
                f"Target platform: {platform}, platform max size: {policy.max_dimension}",
                {
                    "actual_max": actual,
                    "source_width": eff.source_width,
                    "source_height": eff.source_height,
                    "configured_max": eff.max_dimension,
                    "platform_max": policy.max_dimension,
                },
            )
        ]

    @staticmethod
    def _check_format(fmt: PixelFormat, policy: PlatformPolicy, platform: PlatformId) -> List[Diagnostic]:
        if fmt in policy.accepted_formats:
            return []
        accepted = sorted(f.value for f in policy.accepted_formats)
        return [
            Diagnostic(
                "ERROR",
                RuleKind.FORMAT,
                f"Compression format does not meet requirements\n"
                f"Current format: {fmt}\n"
                f"Target platform: {platform}, accepted formats: {', '.join(accepted)}",
                {"current_format": fmt.value, "accepted_formats": accepted},
            )
        ]

    @staticmethod
    def _check_footprint(footprint_mb: float, fmt: PixelFormat, policy: PlatformPolicy) -> List[Diagnostic]:
        if footprint_mb <= policy.max_footprint_mb:
            return []
        diags = [
            Diagnostic(
                "ERROR",
                RuleKind.FOOTPRINT,
                f"Estimated memory too large: {footprint_mb:.2f}MB\n"
                f"Unless required, keep textures under {policy.max_footprint_mb:g}MB",
                {"estimate_mb": footprint_mb, "budget_mb": policy.max_footprint_mb},
            )
        ]
        if is_crunched(fmt):
            diags.append(
                Diagnostic(
                    "INFO",
                    RuleKind.FOOTPRINT,
                    f"{fmt} is small on disk but decompresses to full block size in memory",
                    {"format": fmt.value},
                )
            )
        return diags

    @staticmethod
    def _check_disk_size(asset: AssetRecord, policy: PlatformPolicy) -> List[Diagnostic]:
        if policy.max_disk_mb is None:
            return []
        size = asset.importer.file_size_bytes
        if size is None:
            logger.debug("Disk size unknown for %s; disk rule skipped", asset.path)
            return []
        disk_mb = size / BYTES_PER_MB
        if disk_mb <= policy.max_disk_mb:
            return []
        return [
            Diagnostic(
                "ERROR",
                RuleKind.DISK_SIZE,
                f"File size too large: {disk_mb:.2f}MB\n"
                f"Unless required, keep files under {policy.max_disk_mb:g}MB",
                {"disk_mb": disk_mb, "budget_mb": policy.max_disk_mb},
            )
        ]
