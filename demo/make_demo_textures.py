import json
from pathlib import Path

from PIL import Image


def write_png(path: Path, size=(256, 256), mode="RGB"):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size).save(path)


def write_sidecar(image: Path, settings: dict):
    image.with_name(image.name + ".texcheck.json").write_text(json.dumps(settings, indent=2), encoding="utf-8")


def main():
    base = Path(__file__).parent / "Assets"

    # Passes on Android: small, ASTC 6x6 override
    good = base / "Textures" / "Crate_BaseColor.png"
    write_png(good, (512, 512))
    write_sidecar(good, {
        "guid": "demo-crate",
        "mipmaps": False,
        "platforms": {"Android": {"overridden": True, "max_size": 1024, "format": "ASTC_6x6", "quality": 50}},
    })

    # Too large and wrong format on Android
    big = base / "Textures" / "Terrain_Albedo.png"
    write_png(big, (2048, 2048))
    write_sidecar(big, {
        "guid": "demo-terrain",
        "platforms": {"Android": {"overridden": True, "max_size": 2048, "format": "DXT5", "quality": 50}},
    })

    # No override: Automatic, resolved from what the importer recorded
    auto = base / "UI" / "Icon_Atlas.png"
    write_png(auto, (1024, 512), mode="RGBA")
    write_sidecar(auto, {
        "guid": "demo-atlas",
        "compression": "Compressed",
        "max_size": 1024,
        "automatic_formats": {"Android": "ETC2_RGBA8", "Standalone": "DXT5", "iPhone": "ASTC_6x6", "WebGL": "DXT5"},
    })

    # Excluded by keyword (see settings below)
    write_png(base / "Editor" / "Gizmo.png", (4096, 4096))

    settings = {
        "enable_check": True,
        "custom_message": "Please follow the project's texture guidelines.",
        "platforms": {
            "Android": {"max_dimension": 1024, "accepted_formats": ["ASTC_6x6"], "max_footprint_mb": 20},
            "HMIAndroid": {"max_dimension": 1024, "accepted_formats": ["ETC2_RGBA8"], "max_footprint_mb": 20},
            "iOS": {"max_dimension": 1024, "accepted_formats": ["ASTC_6x6"], "max_footprint_mb": 20},
            "WebGL": {"max_dimension": 1024, "accepted_formats": ["DXT5", "DXT5Crunched"], "max_footprint_mb": 20},
            "Desktop": {"max_dimension": 2048, "accepted_formats": ["DXT5", "BC7"], "max_footprint_mb": 20, "max_disk_mb": 20},
        },
        "exclusions": {"path_prefixes": ["Assets/Plugins/"], "segment_keywords": ["Editor"]},
    }
    (Path(__file__).parent / "settings.json").write_text(json.dumps(settings, indent=2), encoding="utf-8")


if __name__ == "__main__":
    main()
