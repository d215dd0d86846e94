from __future__ import annotations

import pytest

from texcheck.core.compliance import ComplianceEvaluator, RuleKind
from texcheck.core.exclusion import ExclusionRules
from texcheck.core.formats import PixelFormat
from texcheck.core.importer import AssetRecord, CompressionMode, ImporterConfig, PlatformBlock
from texcheck.errors import ConfigurationError, PreconditionViolation
from texcheck.profiles import CheckSettings, PlatformId, PlatformPolicy, PolicySet


def android_settings(**kw) -> CheckSettings:
    policy = PlatformPolicy(
        max_dimension=kw.pop("max_dimension", 1024),
        accepted_formats=frozenset(kw.pop("accepted", {PixelFormat.ASTC_6X6})),
        max_footprint_mb=kw.pop("max_footprint_mb", 20.0),
        advisory=kw.pop("advisory", ""),
        max_disk_mb=kw.pop("max_disk_mb", None),
    )
    kw.setdefault("custom_message", "Follow the texture guide.")
    return CheckSettings(policies=PolicySet({PlatformId.ANDROID: policy}), **kw)


def override_asset(path, w, h, fmt, max_size=2048, quality=50, mip=True, **kw) -> AssetRecord:
    imp = ImporterConfig(
        source_width=w,
        source_height=h,
        mipmap_enabled=mip,
        overrides={"Android": PlatformBlock(max_size=max_size, format=fmt, quality=quality)},
        **kw,
    )
    return AssetRecord(asset_id=path, path=path, importer=imp)


def auto_asset(path, w, h, recorded=None, max_size=2048, mip=True) -> AssetRecord:
    imp = ImporterConfig(
        source_width=w,
        source_height=h,
        compression=CompressionMode.COMPRESSED,
        max_size=max_size,
        mipmap_enabled=mip,
        automatic_formats={"Android": recorded} if recorded else {},
    )
    return AssetRecord(asset_id=path, path=path, importer=imp)


def test_oversized_wrong_format_reports_size_and_format():
    ev = ComplianceEvaluator(android_settings())
    v = ev.evaluate(override_asset("Assets/T/Big.png", 2048, 2048, PixelFormat.DXT5), PlatformId.ANDROID)

    assert v.has_issue
    assert v.kinds() == [RuleKind.SIZE, RuleKind.FORMAT, RuleKind.ADVISORY]
    size = v.diagnostics[0]
    assert size.data["actual_max"] == 2048
    assert size.data["platform_max"] == 1024
    assert v.diagnostics[1].data["current_format"] == "DXT5"
    assert v.diagnostics[1].data["accepted_formats"] == ["ASTC_6x6"]
    assert v.diagnostics[-1].message == "Note: Follow the texture guide."


def test_small_astc_texture_passes():
    ev = ComplianceEvaluator(android_settings())
    v = ev.evaluate(override_asset("Assets/T/Small.png", 512, 512, PixelFormat.ASTC_6X6, mip=False), PlatformId.ANDROID)

    assert not v.has_issue
    assert v.diagnostics == ()
    assert v.footprint_mb == pytest.approx(512 * 512 * (16 / 36) / 1024 ** 2)
    assert v.footprint_mb == pytest.approx(0.11, abs=0.01)


def test_disabled_engine_is_always_clean():
    ev = ComplianceEvaluator(android_settings(enable_check=False))
    v = ev.evaluate(override_asset("Assets/T/Big.png", 8192, 8192, PixelFormat.RGBA32, max_size=8192), PlatformId.ANDROID)
    assert not v.has_issue
    assert v.diagnostics == ()


def test_excluded_path_is_clean_before_anything_else():
    settings = android_settings(exclusions=ExclusionRules.build(keywords=["Editor"]))
    ev = ComplianceEvaluator(settings)
    # Unresolvable automatic format would raise if evaluation went further.
    v = ev.evaluate(auto_asset("Assets/Editor/Gizmo.png", 8192, 8192), PlatformId.ANDROID)
    assert not v.has_issue


def test_zero_size_texture_is_clean():
    ev = ComplianceEvaluator(android_settings())
    v = ev.evaluate(override_asset("Assets/T/Empty.png", 0, 0, PixelFormat.DXT5), PlatformId.ANDROID)
    assert not v.has_issue


def test_missing_platform_policy_is_a_configuration_error():
    ev = ComplianceEvaluator(android_settings())
    with pytest.raises(ConfigurationError):
        ev.evaluate(override_asset("Assets/T/A.png", 64, 64, PixelFormat.DXT5), PlatformId.IOS)


def test_diagnostic_order_is_fixed():
    ev = ComplianceEvaluator(android_settings())
    v = ev.evaluate(auto_asset("Assets/T/Huge.png", 8192, 8192, recorded=PixelFormat.RGBA32, max_size=8192), PlatformId.ANDROID)

    assert v.has_issue
    assert v.kinds() == [
        RuleKind.AUTO_RESOLUTION,
        RuleKind.SIZE,
        RuleKind.FORMAT,
        RuleKind.FOOTPRINT,
        RuleKind.ADVISORY,
    ]
    assert v.resolved_format is PixelFormat.RGBA32


def test_resolution_note_alone_is_not_an_issue():
    ev = ComplianceEvaluator(android_settings())
    v = ev.evaluate(auto_asset("Assets/T/Ok.png", 256, 256, recorded=PixelFormat.ASTC_6X6), PlatformId.ANDROID)
    assert not v.has_issue
    assert v.kinds() == [RuleKind.AUTO_RESOLUTION]
    assert v.diagnostics[0].level == "INFO"


def test_custom_resolver_is_consulted():
    seen = []

    def host(platform, importer):
        seen.append(platform)
        return PixelFormat.ASTC_6X6

    ev = ComplianceEvaluator(android_settings(), resolve_automatic=host)
    v = ev.evaluate(auto_asset("Assets/T/Ok.png", 256, 256), PlatformId.ANDROID)
    assert seen == [PlatformId.ANDROID]
    assert not v.has_issue


def test_unresolved_automatic_fails_loud_when_strict():
    ev = ComplianceEvaluator(android_settings())
    with pytest.raises(PreconditionViolation):
        ev.evaluate(auto_asset("Assets/T/Unknown.png", 256, 256), PlatformId.ANDROID)


def test_unresolved_automatic_is_estimated_conservatively_when_lenient():
    ev = ComplianceEvaluator(android_settings(strict=False))
    v = ev.evaluate(auto_asset("Assets/T/Unknown.png", 512, 512, mip=False), PlatformId.ANDROID)
    assert not v.has_issue
    assert v.kinds() == [RuleKind.AUTO_RESOLUTION]
    assert v.resolved_format is None
    assert v.footprint_mb == pytest.approx(0.25)


def test_footprint_violation_with_crunched_note():
    settings = android_settings(max_dimension=4096, accepted={PixelFormat.DXT5_CRUNCHED})
    ev = ComplianceEvaluator(settings)
    asset = override_asset("Assets/T/Sky.png", 4096, 4096, PixelFormat.DXT5_CRUNCHED, max_size=4096)
    v = ev.evaluate(asset, PlatformId.ANDROID)

    assert v.has_issue
    assert v.kinds() == [RuleKind.FOOTPRINT, RuleKind.FOOTPRINT, RuleKind.ADVISORY]
    assert v.diagnostics[0].level == "ERROR"
    assert v.diagnostics[0].data["estimate_mb"] == pytest.approx(16 * 1.33)
    assert v.diagnostics[0].data["budget_mb"] == 20.0
    assert v.diagnostics[1].level == "INFO"


def test_disk_size_rule_runs_only_when_size_known():
    settings = android_settings(max_disk_mb=1.0)
    ev = ComplianceEvaluator(settings)

    heavy = override_asset("Assets/T/Heavy.png", 256, 256, PixelFormat.ASTC_6X6, file_size_bytes=3 * 1024 * 1024)
    v = ev.evaluate(heavy, PlatformId.ANDROID)
    assert v.has_issue
    assert v.kinds() == [RuleKind.DISK_SIZE, RuleKind.ADVISORY]

    missing = override_asset("Assets/T/Gone.png", 256, 256, PixelFormat.ASTC_6X6)
    assert not ev.evaluate(missing, PlatformId.ANDROID).has_issue


def test_platform_advisory_overrides_custom_message():
    ev = ComplianceEvaluator(android_settings(advisory="Android textures: ASTC 6x6 only."))
    v = ev.evaluate(override_asset("Assets/T/Big.png", 2048, 2048, PixelFormat.DXT5), PlatformId.ANDROID)
    assert v.diagnostics[-1].message == "Note: Android textures: ASTC 6x6 only."


def test_message_lists_diagnostics_under_file_name():
    ev = ComplianceEvaluator(android_settings())
    v = ev.evaluate(override_asset("Assets\\T\\Big.png", 2048, 2048, PixelFormat.DXT5), PlatformId.ANDROID)
    text = v.message()
    assert text.startswith("Texture: Big.png\n")
    assert "Actual max size too large: 2048" in text
    assert "Current format: DXT5" in text
