from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from texcheck.config import TOOL_VERSION
from texcheck.core.batch import run_batch
from texcheck.core.compliance import ComplianceEvaluator
from texcheck.core.ledger import IssueLedger
from texcheck.core.reporting import build_report_dict, write_html_report, write_json_report
from texcheck.core.sources import scan_roots
from texcheck.errors import ConfigurationError, PreconditionViolation
from texcheck.logging_setup import setup_logging
from texcheck.profiles import active_platform, default_settings, load_settings

logger = logging.getLogger("texcheck.app")

EXIT_CLEAN = 0
EXIT_ISSUES = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="texcheck",
        description="Check texture import settings against per-platform size, format and memory rules.",
    )
    parser.add_argument("roots", nargs="+", type=Path, help="Folder(s) to scan for textures")
    parser.add_argument("--settings", type=Path, help="Settings JSON (defaults to the shipped policy)")
    parser.add_argument("--platform", default="Standalone", help="Active build target, e.g. Android, iOS, WebGL")
    parser.add_argument("--build-flavor", default="", help="Build flavor signal; 'HMI' selects HMI Android")
    parser.add_argument("--project-root", type=Path, help="Report paths relative to this folder")
    parser.add_argument("--json", type=Path, dest="json_out", help="Write a JSON report here")
    parser.add_argument("--html", type=Path, dest="html_out", help="Write an HTML report here")
    parser.add_argument("--lenient", action="store_true", help="Fall back to conservative estimates instead of failing")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def run_app(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(force_debug=args.debug)

    try:
        settings = load_settings(args.settings) if args.settings else default_settings()
        if args.lenient:
            settings = replace(settings, strict=False)

        platform = active_platform(args.platform, args.build_flavor)
        # Fail before scanning if the platform has no policy.
        settings.policies.policy_for(platform)

        assets, skipped = scan_roots(args.roots, args.project_root)
        evaluator = ComplianceEvaluator(settings)
        ledger = IssueLedger()
        verdicts, summary = run_batch(assets, evaluator, platform, ledger)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG
    except PreconditionViolation as e:
        logger.error("%s (rerun with --lenient to estimate conservatively)", e)
        return EXIT_CONFIG

    for path in ledger.paths():
        logger.warning("%s\n%s", path, ledger.message_for(path).rstrip())

    if args.json_out or args.html_out:
        report = build_report_dict(TOOL_VERSION, summary, verdicts, skipped)
        if args.json_out:
            write_json_report(report, args.json_out)
            logger.info("JSON report: %s", args.json_out)
        if args.html_out:
            write_html_report(report, args.html_out)
            logger.info("HTML report: %s", args.html_out)

    return EXIT_ISSUES if summary.flagged else EXIT_CLEAN


def main() -> None:
    sys.exit(run_app())
