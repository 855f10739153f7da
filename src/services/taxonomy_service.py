from __future__ import annotations

from typing import Callable, Optional


LabelPredicate = Callable[[str], bool]


def _contains(keyword: str) -> LabelPredicate:
    kw = keyword.lower()
    return lambda label: kw in label


# Evaluated in order; first match wins.
TAXONOMY: list[tuple[str, LabelPredicate]] = [
    ("Calculus", _contains("calculus")),
    ("Caries", _contains("caries")),
    ("Gingivitis", _contains("gingivitis")),
    ("Tooth Discoloration", _contains("discoloration")),
    ("Mouth Ulcer", _contains("ulcer")),
    ("Hypodontia", _contains("hypodontia")),
]


def match(raw_label: str) -> Optional[str]:
    """Return the canonical condition name for a raw classifier label, or None."""
    label = (raw_label or "").lower()
    for name, predicate in TAXONOMY:
        if predicate(label):
            return name
    return None
