from __future__ import annotations

from typing import NamedTuple, Optional

from src.core.schemas import RiskLevel


class RiskBands(NamedTuple):
    """Strict lower bounds: confidence > high -> High, > medium -> Medium."""

    medium: float
    high: Optional[float] = None


# Fixed product thresholds. Conditions without a high cut-point never reach High.
RISK_TABLE: dict[str, RiskBands] = {
    "Caries": RiskBands(medium=0.5, high=0.7),
    "Gingivitis": RiskBands(medium=0.6, high=0.8),
    "Calculus": RiskBands(medium=0.6),
    "Mouth Ulcer": RiskBands(medium=0.7),
    "Hypodontia": RiskBands(medium=0.6, high=0.8),
    "Tooth Discoloration": RiskBands(medium=0.7),
}


def stratify(name: str, confidence: float) -> RiskLevel:
    bands = RISK_TABLE.get(name)
    if bands is None:
        return RiskLevel.Low
    if bands.high is not None and confidence > bands.high:
        return RiskLevel.High
    if confidence > bands.medium:
        return RiskLevel.Medium
    return RiskLevel.Low
