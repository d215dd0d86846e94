from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from texcheck.core.batch import BatchSummary
from texcheck.core.compliance import ComplianceVerdict
from texcheck.core.sources import SkippedFile


def iso_now() -> str:
    return datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds")


def serialize_diagnostics(diags) -> List[dict]:
    return [
        {"level": d.level, "kind": d.kind.value, "message": d.message, "data": d.data}
        for d in diags
    ]


def serialize_skipped(skipped: List[SkippedFile]) -> List[dict]:
    return [{"file": s.rel_path, "reason": s.reason} for s in skipped]


def build_report_dict(
    tool_version: str,
    summary: BatchSummary,
    verdicts: List[ComplianceVerdict],
    skipped: List[SkippedFile],
) -> dict:
    textures = []
    for v in sorted(verdicts, key=lambda v: v.path.lower()):
        textures.append(
            {
                "path": v.path,
                "has_issue": v.has_issue,
                "format": v.resolved_format.value if v.resolved_format else None,
                "footprint_mb": None if v.footprint_mb is None else round(v.footprint_mb, 4),
                "diagnostics": serialize_diagnostics(v.diagnostics),
            }
        )

    return {
        "tool": "texcheck",
        "version": tool_version,
        "timestamp": iso_now(),
        "summary": asdict(summary),
        "textures": textures,
        "skipped": serialize_skipped(skipped),
    }


def write_json_report(report: dict, output_path: Path) -> None:
    output_path.write_text(json.dumps(report, indent=2), encoding="utf-8")


def write_html_report(report: dict, output_path: Path) -> None:
    """
    Simple no-deps HTML report. Only flagged textures are listed.
    """
    def esc(s: str) -> str:
        return (
            s.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
        )

    title = "Texture Check - Report"
    ts = esc(str(report.get("timestamp", "")))
    summary = report.get("summary", {})
    platform = esc(str(summary.get("platform", "")))

    rows = []
    for tex in report.get("textures", []):
        if not tex.get("has_issue"):
            continue
        path = esc(tex.get("path", ""))
        fmt = esc(str(tex.get("format") or "-"))
        mb = tex.get("footprint_mb")
        mb_s = "-" if mb is None else f"{mb:.2f} MB"

        lines = []
        for d in tex.get("diagnostics", []):
            lvl = esc(d.get("level", ""))
            msg = esc(d.get("message", "")).replace("\n", "<br/>")
            lines.append(f"<div><b>{lvl}</b>: {msg}</div>")

        rows.append(
            f"""
            <tr>
              <td style="vertical-align:top; padding:8px; border-bottom:1px solid #ddd;"><b>{path}</b></td>
              <td style="vertical-align:top; padding:8px; border-bottom:1px solid #ddd;">{fmt}<br/>{mb_s}</td>
              <td style="vertical-align:top; padding:8px; border-bottom:1px solid #ddd;">{''.join(lines)}</td>
            </tr>
            """
        )
    rows_html = "".join(rows) if rows else '<tr><td colspan="3"><i>No issues</i></td></tr>'

    skipped_lines = []
    for s in report.get("skipped", []):
        skipped_lines.append(f"<div><b>{esc(s.get('file', ''))}</b>: {esc(s.get('reason', ''))}</div>")
    skipped_html = "".join(skipped_lines) if skipped_lines else "<div><i>None</i></div>"

    html = f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{esc(title)}</title>
</head>
<body style="font-family: Arial, sans-serif; margin: 24px;">
  <h1 style="margin-bottom:4px;">{esc(title)}</h1>
  <div style="color:#444;">Timestamp: {ts}</div>
  <div style="color:#444;">Platform: {platform}</div>
  <div style="color:#444; margin-bottom:16px;">
    Checked: {summary.get("evaluated", 0)}, flagged: {summary.get("flagged", 0)}
  </div>

  <h2>Flagged Textures</h2>
  <table style="border-collapse:collapse; width:100%;">
    <thead>
      <tr>
        <th style="text-align:left; padding:8px; border-bottom:2px solid #333;">Texture</th>
        <th style="text-align:left; padding:8px; border-bottom:2px solid #333;">Format / Memory</th>
        <th style="text-align:left; padding:8px; border-bottom:2px solid #333;">Diagnostics</th>
      </tr>
    </thead>
    <tbody>
      {rows_html}
    </tbody>
  </table>

  <h2 style="margin-top:24px;">Skipped Files</h2>
  {skipped_html}
</body>
</html>
"""
    output_path.write_text(html, encoding="utf-8")
