from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set

from texcheck.core.compliance import ComplianceEvaluator, ComplianceVerdict
from texcheck.core.importer import AssetRecord
from texcheck.core.ledger import IssueLedger
from texcheck.profiles import PlatformId

logger = logging.getLogger("texcheck.core.batch")


@dataclass
class BatchSummary:
    platform: str
    candidates: int
    evaluated: int
    duplicates: int
    flagged: int
    clean: int
    cancelled: bool = False


def run_batch(
    assets: Iterable[AssetRecord],
    evaluator: ComplianceEvaluator,
    platform: PlatformId,
    ledger: IssueLedger,
    cancel: Optional[threading.Event] = None,
) -> tuple[List[ComplianceVerdict], BatchSummary]:
    """
    Evaluate each asset once and record the verdicts in the ledger.

    Returns (verdicts, summary) for this batch only. Cancelling stops between
    assets; verdicts already recorded stay recorded.
    """
    seen: Set[str] = set()
    verdicts: List[ComplianceVerdict] = []
    candidates = duplicates = flagged = clean = 0
    cancelled = False

    for asset in assets:
        if cancel is not None and cancel.is_set():
            cancelled = True
            logger.info("Batch cancelled after %d asset(s)", len(seen))
            break

        candidates += 1
        if asset.asset_id in seen:
            duplicates += 1
            continue
        seen.add(asset.asset_id)

        verdict = evaluator.evaluate(asset, platform)
        ledger.record(verdict)
        verdicts.append(verdict)
        if verdict.has_issue:
            flagged += 1
        else:
            clean += 1

    summary = BatchSummary(
        platform=platform.value,
        candidates=candidates,
        evaluated=len(seen),
        duplicates=duplicates,
        flagged=flagged,
        clean=clean,
        cancelled=cancelled,
    )
    logger.info(
        "Checked %d texture(s) for %s: %d flagged, %d clean",
        summary.evaluated,
        summary.platform,
        summary.flagged,
        summary.clean,
    )
    return verdicts, summary


def batch_issues(verdicts: Iterable[ComplianceVerdict]) -> Dict[str, str]:
    """path -> message for the verdicts that raised an issue."""
    return {v.path: v.message() for v in verdicts if v.has_issue}


def apply_asset_changes(
    ledger: IssueLedger,
    deleted: Sequence[str] = (),
    moved: Sequence[str] = (),
    moved_from: Sequence[str] = (),
) -> None:
    """Keep the ledger in step with host delete/move notifications."""
    if len(moved) != len(moved_from):
        raise ValueError("moved and moved_from must have the same length")

    for path in deleted:
        ledger.unmark(path)
    for old, new in zip(moved_from, moved):
        ledger.rename(old, new)
