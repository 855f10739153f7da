from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel
from typing import Dict, List, Optional
from src.core.schemas import ConditionResult, RiskLevel, ScanResult, TimeWindow
from src.services.guidance_service import PREVENTION_TIPS, ConditionGuidance, guidance_for
from src.services.history_service import (
    conditions_by_confidence,
    highest_risk,
    risk_breakdown,
)


class HealthResponse(BaseModel):
    status: str


class ConditionItem(BaseModel):
    id: uuid.UUID
    name: str
    risk: RiskLevel
    label: str
    color: str
    confidence: float

    @classmethod
    def from_condition(cls, c: ConditionResult) -> "ConditionItem":
        return cls(id=c.id, name=c.name, risk=c.risk, label=c.risk.label, color=c.risk.color, confidence=c.confidence)


class ScanSummary(BaseModel):
    id: uuid.UUID
    timestamp: datetime
    condition_count: int
    headline: ConditionItem
    has_image: bool

    @classmethod
    def from_scan(cls, scan: ScanResult) -> "ScanSummary":
        return cls(
            id=scan.id,
            timestamp=scan.timestamp,
            condition_count=len(scan.conditions),
            headline=ConditionItem.from_condition(highest_risk(scan)),
            has_image=scan.has_image,
        )


class ScanDetail(ScanSummary):
    conditions: List[ConditionItem]
    breakdown: Dict[RiskLevel, int]
    guidance: List[ConditionGuidance]
    prevention_tips: List[str]

    @classmethod
    def from_scan(cls, scan: ScanResult) -> "ScanDetail":
        ordered = conditions_by_confidence(scan)
        summary = ScanSummary.from_scan(scan)
        return cls(
            **summary.model_dump(),
            conditions=[ConditionItem.from_condition(c) for c in ordered],
            breakdown=risk_breakdown(scan),
            guidance=[guidance_for(c) for c in ordered],
            prevention_tips=list(PREVENTION_TIPS),
        )


class ScanListResponse(BaseModel):
    window: TimeWindow
    count: int
    items: List[ScanSummary]


class HistorySummaryResponse(BaseModel):
    window: TimeWindow
    scan_count: int
    monthly_count: int
    health_score: Optional[int] = None
    health_score_display: str
