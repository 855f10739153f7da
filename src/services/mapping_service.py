from __future__ import annotations

import math
from typing import Iterable

from src.core.schemas import ConditionResult, RawPrediction
from src.services import risk_service, taxonomy_service


def clamp_score(score: float) -> float:
    """Clamp a raw classifier score into [0, 1]; NaN maps to 0."""
    value = float(score)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def map_predictions(raw: Iterable[RawPrediction | tuple[str, float]]) -> list[ConditionResult]:
    """
    Turn raw classifier output into canonical conditions.

    - Keeps the classifier's ranking order.
    - Labels outside the taxonomy are dropped.
    - Duplicates are NOT merged: two raw labels resolving to the same
      condition yield two results.
    """
    conditions: list[ConditionResult] = []
    for label, score in raw:
        name = taxonomy_service.match(label)
        if name is None:
            continue
        confidence = clamp_score(score)
        conditions.append(ConditionResult(
            name=name,
            risk=risk_service.stratify(name, confidence),
            confidence=confidence,
        ))
    return conditions
