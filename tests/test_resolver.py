from __future__ import annotations

from texcheck.core.formats import PixelFormat
from texcheck.core.importer import CompressionMode, ImporterConfig, PlatformBlock
from texcheck.core.resolver import resolve
from texcheck.profiles import PlatformId


def make_importer(**kw) -> ImporterConfig:
    kw.setdefault("source_width", 2048)
    kw.setdefault("source_height", 1024)
    return ImporterConfig(**kw)


def test_override_block_is_used_verbatim():
    imp = make_importer(
        max_size=4096,
        overrides={"Android": PlatformBlock(max_size=512, format=PixelFormat.ASTC_8X8, quality=80)},
    )
    eff = resolve(imp, PlatformId.ANDROID)
    assert eff.uses_platform_override
    assert eff.max_dimension == 512
    assert eff.format is PixelFormat.ASTC_8X8
    assert eff.compression_quality == 80
    assert eff.actual_max == 512


def test_non_overridden_block_falls_back_to_defaults():
    imp = make_importer(
        max_size=1024,
        quality=30,
        overrides={"Android": PlatformBlock(max_size=256, format=PixelFormat.ETC2_RGBA8, overridden=False)},
    )
    eff = resolve(imp, PlatformId.ANDROID)
    assert not eff.uses_platform_override
    assert eff.max_dimension == 1024
    assert eff.compression_quality == 30
    assert eff.format is PixelFormat.AUTOMATIC


def test_default_format_follows_compression_mode():
    for mode in (CompressionMode.COMPRESSED, CompressionMode.COMPRESSED_LQ, CompressionMode.COMPRESSED_HQ):
        assert resolve(make_importer(compression=mode), PlatformId.DESKTOP).format is PixelFormat.AUTOMATIC
    eff = resolve(make_importer(compression=CompressionMode.UNCOMPRESSED), PlatformId.DESKTOP)
    assert eff.format is PixelFormat.RGBA32


def test_hmi_reads_android_block_and_ios_reads_iphone_block():
    imp = make_importer(
        overrides={
            "Android": PlatformBlock(max_size=1024, format=PixelFormat.ETC2_RGBA8),
            "iPhone": PlatformBlock(max_size=2048, format=PixelFormat.ASTC_6X6),
        }
    )
    assert resolve(imp, PlatformId.HMI_ANDROID).format is PixelFormat.ETC2_RGBA8
    assert resolve(imp, PlatformId.IOS).format is PixelFormat.ASTC_6X6
    assert not resolve(imp, PlatformId.WEBGL).uses_platform_override


def test_mipmaps_and_source_size_copied_regardless_of_override():
    imp = make_importer(
        mipmap_enabled=False,
        overrides={"Android": PlatformBlock(max_size=256, format=PixelFormat.ASTC_4X4)},
    )
    for platform in (PlatformId.ANDROID, PlatformId.DESKTOP):
        eff = resolve(imp, platform)
        assert eff.mipmap_enabled is False
        assert (eff.source_width, eff.source_height) == (2048, 1024)


def test_resolution_is_idempotent():
    imp = make_importer(overrides={"WebGL": PlatformBlock(max_size=1024, format=PixelFormat.DXT5)})
    assert resolve(imp, PlatformId.WEBGL) == resolve(imp, PlatformId.WEBGL)
