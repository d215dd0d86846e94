from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List

_SEP_RE = re.compile(r"[\\/]+")


@dataclass(frozen=True)
class ExclusionRules:
    path_prefixes: FrozenSet[str] = field(default_factory=frozenset)
    segment_keywords: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def build(cls, prefixes: Iterable[str] = (), keywords: Iterable[str] = ()) -> "ExclusionRules":
        return cls(
            path_prefixes=frozenset(p.strip() for p in prefixes if p and p.strip()),
            segment_keywords=frozenset(k.strip() for k in keywords if k and k.strip()),
        )


def path_segments(path: str) -> List[str]:
    return [s for s in _SEP_RE.split(path) if s]


def is_excluded(path: str, rules: ExclusionRules) -> bool:
    """
    True when the path starts with a configured prefix, or one of its
    folder/file segments equals a keyword. Both comparisons ignore case;
    a keyword inside a longer segment ("EditorTools") does not match.
    """
    if not path:
        return False

    low = path.lower()
    if any(low.startswith(p.lower()) for p in rules.path_prefixes):
        return True

    keywords = {k.lower() for k in rules.segment_keywords}
    if keywords:
        for seg in path_segments(low):
            if seg in keywords:
                return True

    return False
