from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


CONDITION_NAMES = (
    "Calculus",
    "Caries",
    "Gingivitis",
    "Tooth Discoloration",
    "Mouth Ulcer",
    "Hypodontia",
)


class RiskLevel(str, Enum):
    Low = "Low"
    Medium = "Medium"
    High = "High"

    @property
    def label(self) -> str:
        return _RISK_LABELS[self]

    @property
    def color(self) -> str:
        return _RISK_COLORS[self]

    @property
    def rank(self) -> int:
        return _RISK_RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_LABELS = {RiskLevel.Low: "Safe", RiskLevel.Medium: "Monitor", RiskLevel.High: "See Dentist"}
_RISK_COLORS = {RiskLevel.Low: "#34C759", RiskLevel.Medium: "#FF9500", RiskLevel.High: "#FF3B30"}
_RISK_RANKS = {RiskLevel.Low: 0, RiskLevel.Medium: 1, RiskLevel.High: 2}


class TimeWindow(str, Enum):
    All = "all"
    ThisWeek = "this_week"
    ThisMonth = "this_month"
    Last3Months = "last_3_months"


class RawPrediction(NamedTuple):
    label: str
    score: float


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(ts: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


class ConditionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    risk: RiskLevel
    confidence: float = Field(..., ge=0.0, le=1.0)


class ScanResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    timestamp: datetime = Field(default_factory=_utcnow)
    conditions: tuple[ConditionResult, ...] = Field(..., min_length=1)
    image_bytes: Optional[bytes] = Field(default=None, exclude=True, repr=False)

    @field_validator("timestamp")
    @classmethod
    def _timestamp_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @property
    def has_image(self) -> bool:
        return self.image_bytes is not None
