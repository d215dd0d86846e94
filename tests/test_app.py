from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from PIL import Image

from texcheck.app import EXIT_CLEAN, EXIT_CONFIG, EXIT_ISSUES, run_app


@pytest.fixture(autouse=True)
def restore_root_logging():
    # run_app reconfigures the root logger; put pytest's handlers back afterwards
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        if h not in handlers:
            h.close()
            root.removeHandler(h)
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)


def write_png(path: Path, size=(4, 4), mode="RGB") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size).save(path)


def write_sidecar(image: Path, data: dict) -> None:
    image.with_name(image.name + ".texcheck.json").write_text(json.dumps(data), encoding="utf-8")


def make_project(root: Path) -> Path:
    assets = root / "Assets"
    big = assets / "Textures" / "Big.png"
    write_png(big, size=(2048, 2048))
    write_sidecar(big, {"platforms": {"Android": {"max_size": 2048, "format": "DXT5"}}})

    ok = assets / "Textures" / "Ok.png"
    write_png(ok, size=(256, 256))
    write_sidecar(ok, {"platforms": {"Android": {"max_size": 1024, "format": "ASTC_6x6"}}})

    # No sidecar and no recorded automatic format, but excluded
    write_png(assets / "Editor" / "Gizmo.png", size=(4096, 4096))
    return assets


def write_settings(root: Path) -> Path:
    path = root / "settings.json"
    path.write_text(
        json.dumps({
            "platforms": {
                "Android": {"max_dimension": 1024, "accepted_formats": ["ASTC_6x6"], "max_footprint_mb": 20},
            },
            "exclusions": {"segment_keywords": ["Editor"]},
        }),
        encoding="utf-8",
    )
    return path


def test_cli_reports_flagged_textures(tmp_path: Path) -> None:
    assets = make_project(tmp_path)
    settings = write_settings(tmp_path)
    out_json = tmp_path / "report.json"
    out_html = tmp_path / "report.html"

    code = run_app([
        str(assets),
        "--settings", str(settings),
        "--platform", "Android",
        "--json", str(out_json),
        "--html", str(out_html),
    ])

    assert code == EXIT_ISSUES
    report = json.loads(out_json.read_text(encoding="utf-8"))
    flagged = [t["path"] for t in report["textures"] if t["has_issue"]]
    assert flagged == ["Assets/Textures/Big.png"]
    assert report["summary"]["evaluated"] == 3
    assert "Assets/Textures/Big.png" in out_html.read_text(encoding="utf-8")


def test_cli_clean_when_disabled(tmp_path: Path) -> None:
    assets = make_project(tmp_path)
    settings = tmp_path / "off.json"
    settings.write_text(json.dumps({"enable_check": False}), encoding="utf-8")
    assert run_app([str(assets), "--settings", str(settings), "--platform", "Android"]) == EXIT_CLEAN


def test_cli_config_errors(tmp_path: Path) -> None:
    assets = make_project(tmp_path)
    settings = write_settings(tmp_path)
    # iOS has no policy in this settings file
    assert run_app([str(assets), "--settings", str(settings), "--platform", "iOS"]) == EXIT_CONFIG
    assert run_app([str(tmp_path / "nowhere"), "--platform", "Android"]) == EXIT_CONFIG


def test_cli_lenient_estimates_unresolved_formats(tmp_path: Path) -> None:
    assets = tmp_path / "Assets"
    write_png(assets / "Plain.png", size=(64, 64))
    # Strict: automatic format with nothing recorded
    assert run_app([str(assets), "--platform", "Android"]) == EXIT_CONFIG
    assert run_app([str(assets), "--platform", "Android", "--lenient"]) == EXIT_CLEAN
