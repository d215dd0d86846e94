from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional

from texcheck.config import (
    DEFAULT_ADVISORY,
    DEFAULT_FORMAT,
    DEFAULT_MAX_DIMENSION,
    DEFAULT_MAX_FOOTPRINT_MB,
    HMI_FLAVOR,
)
from texcheck.core.exclusion import ExclusionRules
from texcheck.core.formats import PixelFormat, parse_format
from texcheck.errors import ConfigurationError
from texcheck.util.json_values import as_bool


class PlatformId(Enum):
    ANDROID = "Android"
    HMI_ANDROID = "HMIAndroid"
    IOS = "iOS"
    WEBGL = "WebGL"
    DESKTOP = "Desktop"

    @property
    def host_name(self) -> str:
        """Name of the importer's per-platform settings block."""
        return _HOST_NAMES[self]

    def __str__(self) -> str:
        return self.value


# HMI builds are Android builds; they read the same importer block.
_HOST_NAMES = {
    PlatformId.ANDROID: "Android",
    PlatformId.HMI_ANDROID: "Android",
    PlatformId.IOS: "iPhone",
    PlatformId.WEBGL: "WebGL",
    PlatformId.DESKTOP: "Standalone",
}


def parse_platform(name: str) -> PlatformId:
    key = str(name).strip().lower().replace("-", "").replace("_", "")
    for p in PlatformId:
        if key in (p.value.lower(), p.name.lower().replace("_", "")):
            return p
    raise ConfigurationError(f"Unknown platform '{name}'")


def active_platform(build_target: str, build_flavor: str = "") -> PlatformId:
    """
    Map the host's build target (and its flavor signal) to a PlatformId.
    Anything that is not a mobile or web target counts as Desktop.
    """
    target = (build_target or "").strip().lower()
    if target.startswith("android"):
        if (build_flavor or "").strip().lower() == HMI_FLAVOR.lower():
            return PlatformId.HMI_ANDROID
        return PlatformId.ANDROID
    if target in {"ios", "iphone"}:
        return PlatformId.IOS
    if target == "webgl":
        return PlatformId.WEBGL
    if target in {"hmiandroid", "hmi-android", "hmi_android"}:
        return PlatformId.HMI_ANDROID
    return PlatformId.DESKTOP


@dataclass(frozen=True)
class PlatformPolicy:
    max_dimension: int
    accepted_formats: FrozenSet[PixelFormat]
    max_footprint_mb: float
    advisory: str = ""
    max_disk_mb: Optional[float] = None  # None = on-disk size not checked

    def __post_init__(self) -> None:
        if self.max_dimension <= 0:
            raise ConfigurationError(f"max_dimension must be positive, got {self.max_dimension}")
        if not self.accepted_formats:
            raise ConfigurationError("accepted_formats must not be empty")
        if PixelFormat.AUTOMATIC in self.accepted_formats:
            raise ConfigurationError("accepted_formats must list concrete formats, not Automatic")
        if self.max_footprint_mb <= 0:
            raise ConfigurationError(f"max_footprint_mb must be positive, got {self.max_footprint_mb}")
        if self.max_disk_mb is not None and self.max_disk_mb <= 0:
            raise ConfigurationError(f"max_disk_mb must be positive, got {self.max_disk_mb}")


@dataclass(frozen=True)
class PolicySet:
    policies: Dict[PlatformId, PlatformPolicy]

    def policy_for(self, platform: PlatformId) -> PlatformPolicy:
        try:
            return self.policies[platform]
        except KeyError:
            raise ConfigurationError(f"No texture policy configured for platform {platform}") from None


@dataclass(frozen=True)
class CheckSettings:
    enable_check: bool = True
    strict: bool = True
    custom_message: str = DEFAULT_ADVISORY
    policies: PolicySet = field(default_factory=lambda: default_policies())
    exclusions: ExclusionRules = field(default_factory=ExclusionRules)

    def advisory_for(self, platform: PlatformId) -> str:
        return self.policies.policy_for(platform).advisory or self.custom_message


def default_policies() -> PolicySet:
    return PolicySet(
        {
            p: PlatformPolicy(
                max_dimension=DEFAULT_MAX_DIMENSION[p.value],
                accepted_formats=frozenset({parse_format(DEFAULT_FORMAT[p.value])}),
                max_footprint_mb=DEFAULT_MAX_FOOTPRINT_MB,
            )
            for p in PlatformId
        }
    )


def default_settings() -> CheckSettings:
    return CheckSettings()


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def _formats_from_json(value: Any) -> FrozenSet[PixelFormat]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"accepted_formats must be a name or a list, got {value!r}")
    return frozenset(parse_format(v) for v in value)


def policy_from_json_dict(d: Dict[str, Any]) -> PlatformPolicy:
    if not isinstance(d, dict):
        raise ConfigurationError(f"Platform policy must be an object, got {d!r}")
    try:
        max_disk = d.get("max_disk_mb")
        return PlatformPolicy(
            max_dimension=int(d["max_dimension"]),
            accepted_formats=_formats_from_json(d["accepted_formats"]),
            max_footprint_mb=float(d.get("max_footprint_mb", DEFAULT_MAX_FOOTPRINT_MB)),
            advisory=str(d.get("advisory") or ""),
            max_disk_mb=None if max_disk is None else float(max_disk),
        )
    except KeyError as e:
        raise ConfigurationError(f"Platform policy missing field {e}") from None
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed platform policy: {e}") from None


def policy_to_json_dict(policy: PlatformPolicy) -> Dict[str, Any]:
    return {
        "max_dimension": policy.max_dimension,
        "accepted_formats": sorted(f.value for f in policy.accepted_formats),
        "max_footprint_mb": policy.max_footprint_mb,
        "advisory": policy.advisory,
        "max_disk_mb": policy.max_disk_mb,
    }


def _string_list(value: Any, what: str) -> Iterable[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"{what} must be a list of strings")
    return [str(x) for x in value]


def to_json_dict(settings: CheckSettings) -> Dict[str, Any]:
    return {
        "enable_check": settings.enable_check,
        "strict": settings.strict,
        "custom_message": settings.custom_message,
        "platforms": {
            p.value: policy_to_json_dict(pol) for p, pol in settings.policies.policies.items()
        },
        "exclusions": {
            "path_prefixes": sorted(settings.exclusions.path_prefixes),
            "segment_keywords": sorted(settings.exclusions.segment_keywords),
        },
    }


def from_json_dict(d: Dict[str, Any]) -> CheckSettings:
    """
    Build settings from a JSON object. A missing "platforms" section means the
    shipped defaults; a present one is taken as-is, so platforms it leaves out
    have no policy.
    """
    if not isinstance(d, dict):
        raise ConfigurationError("Settings must be a JSON object")

    platforms_in = d.get("platforms")
    if platforms_in is None:
        policies = default_policies()
    else:
        if not isinstance(platforms_in, dict):
            raise ConfigurationError("'platforms' must be an object keyed by platform name")
        policies = PolicySet(
            {parse_platform(name): policy_from_json_dict(p) for name, p in platforms_in.items()}
        )

    excl_in = d.get("exclusions") or {}
    if not isinstance(excl_in, dict):
        raise ConfigurationError("'exclusions' must be an object")
    exclusions = ExclusionRules.build(
        prefixes=_string_list(excl_in.get("path_prefixes"), "exclusions.path_prefixes"),
        keywords=_string_list(excl_in.get("segment_keywords"), "exclusions.segment_keywords"),
    )

    return CheckSettings(
        enable_check=as_bool(d.get("enable_check", True), "enable_check"),
        strict=as_bool(d.get("strict", True), "strict"),
        custom_message=str(d.get("custom_message") or DEFAULT_ADVISORY),
        policies=policies,
        exclusions=exclusions,
    )


def load_settings(path: Path) -> CheckSettings:
    try:
        d = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read settings file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Settings file '{path}' is not valid JSON: {e}") from e
    return from_json_dict(d)


def save_settings(settings: CheckSettings, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_json_dict(settings), indent=2), encoding="utf-8")
    return path
