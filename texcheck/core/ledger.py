from __future__ import annotations

import threading
from typing import Dict, List

from texcheck.core.compliance import ComplianceVerdict


class IssueLedger:
    """
    Paths that currently have open texture issues, with their last message.

    Writers serialize on a lock so a batch may evaluate assets in parallel.
    Readers see whichever dict was current when they looked.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issues: Dict[str, str] = {}

    def mark(self, path: str, message: str) -> None:
        """
        Flag `path` with `message`. An empty message is refused (ValueError)
        rather than replaced: the flagged paths are exactly the keys holding a
        non-empty message, and the per-path message is what the host displays.
        """
        if not message:
            raise ValueError("An issue needs a non-empty message")
        with self._lock:
            issues = dict(self._issues)
            issues[path] = message
            self._issues = issues

    def unmark(self, path: str) -> None:
        with self._lock:
            if path not in self._issues:
                return
            issues = dict(self._issues)
            del issues[path]
            self._issues = issues

    def rename(self, old_path: str, new_path: str) -> None:
        with self._lock:
            if old_path not in self._issues or old_path == new_path:
                return
            issues = dict(self._issues)
            issues[new_path] = issues.pop(old_path)
            self._issues = issues

    def clear_all(self) -> None:
        with self._lock:
            self._issues = {}

    def record(self, verdict: ComplianceVerdict) -> None:
        """Flag the path when the verdict has an issue, clear it otherwise."""
        if verdict.has_issue:
            self.mark(verdict.path, verdict.message())
        else:
            self.unmark(verdict.path)

    def is_flagged(self, path: str) -> bool:
        return path in self._issues

    def message_for(self, path: str) -> str:
        return self._issues.get(path, "")

    def paths(self) -> List[str]:
        return sorted(self._issues, key=lambda s: s.lower())

    def snapshot(self) -> Dict[str, str]:
        return dict(self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def __contains__(self, path: object) -> bool:
        return path in self._issues
