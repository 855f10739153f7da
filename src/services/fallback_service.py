from __future__ import annotations

from typing import Sequence

from src.core.schemas import ConditionResult, RiskLevel


# Non-alarming default shown when the model is uncertain or absent.
DEFAULT_CONFIDENCES: tuple[tuple[str, float], ...] = (
    ("Calculus", 0.30),
    ("Caries", 0.20),
    ("Gingivitis", 0.25),
    ("Tooth Discoloration", 0.35),
    ("Mouth Ulcer", 0.10),
    ("Hypodontia", 0.15),
)


def default_conditions() -> list[ConditionResult]:
    return [
        ConditionResult(name=name, risk=RiskLevel.Low, confidence=confidence)
        for name, confidence in DEFAULT_CONFIDENCES
    ]


def apply_fallback(mapped: Sequence[ConditionResult]) -> list[ConditionResult]:
    """Return ``mapped`` unchanged when non-empty, otherwise the default set."""
    if mapped:
        return list(mapped)
    return default_conditions()
